"""Unit tests for the instance snapshot model and tag conversion.

Tests Instance.from_ec2(), runtime calculation and convert_tags_to_dict().
"""

from __future__ import annotations
import datetime
import pytest

from ec2_runtime_checker.models import Instance
from ec2_runtime_checker.utils import convert_tags_to_dict, filter_clause


class TestTagConversion:
    """Test AWS tag list to dictionary conversion."""

    def test_convert_tags_list_to_dict(self):
        """
        GIVEN AWS tags list format
        WHEN convert_tags_to_dict is called
        THEN dictionary should be returned
        """
        tags_list = [
            {"Key": "Name", "Value": "dev-instance"},
            {"Key": "Team", "Value": "backend"},
        ]

        assert convert_tags_to_dict(tags_list) == {"Name": "dev-instance", "Team": "backend"}

    @pytest.mark.parametrize("tags", [None, []])
    def test_convert_empty_tags(self, tags):
        assert convert_tags_to_dict(tags) == {}

    def test_incomplete_tags_skipped(self):
        tags_list = [{"Key": "Team"}, {"Value": "orphan"}, {"Key": "Env", "Value": ""}]
        assert convert_tags_to_dict(tags_list) == {"Env": ""}


def test_filter_clause_copies_values():
    values = ["a"]
    clause = filter_clause("instance-type", values)
    values.append("b")
    assert clause == {"Name": "instance-type", "Values": ["a"]}


class TestInstanceModel:
    """Test Instance built from DescribeInstances records."""

    def test_from_ec2(self, instance_builder, now):
        data = (
            instance_builder.with_instance_id("i-abc")
            .with_type("m5.large")
            .with_name("ci-runner")
            .with_tag("Team", "qa")
            .build()
        )

        instance = Instance.from_ec2(data)

        assert instance.instance_id == "i-abc"
        assert instance.instance_type == "m5.large"
        assert instance.launch_time == now
        assert instance.state == "running"
        assert instance.name == "ci-runner"
        assert instance.tags == {"Name": "ci-runner", "Team": "qa"}

    def test_name_empty_without_name_tag(self, instance_builder):
        assert instance_builder.build_instance().name == ""

    def test_runtime(self, instance_builder, now):
        instance = instance_builder.running_for(hours=3, minutes=30).build_instance()
        assert instance.runtime(now) == datetime.timedelta(hours=3, minutes=30)

    def test_runtime_without_launch_time_raises(self, instance_builder, now):
        instance = instance_builder.with_launch_time(None).build_instance()
        assert instance.launch_time is None
        with pytest.raises(ValueError):
            instance.runtime(now)
