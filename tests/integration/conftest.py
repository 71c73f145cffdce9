"""Fixtures specific to integration tests."""

import pytest
from unittest.mock import Mock


@pytest.fixture(autouse=True)
def _mark_as_integration(request):
    """Automatically mark all tests in integration/ as integration tests."""
    request.node.add_marker(pytest.mark.integration)


@pytest.fixture
def mock_ec2_client():
    """Factory for creating mock EC2 clients with a paginator.

    Example:
        ec2 = mock_ec2_client(pages=[
            {"Reservations": [{"Instances": [instance_data]}]}
        ])
    """
    def _create_mock(**kwargs):
        mock = Mock()
        paginator = Mock()
        paginator.paginate.return_value = kwargs.get("pages", [{"Reservations": []}])
        mock.get_paginator.return_value = paginator
        mock.terminate_instances.return_value = kwargs.get(
            "terminate_response",
            {}
        )
        return mock
    return _create_mock


@pytest.fixture
def mock_sns_client():
    """Factory for creating mock SNS clients."""
    def _create_mock(**kwargs):
        mock = Mock()
        mock.publish.return_value = kwargs.get(
            "publish_response",
            {"MessageId": "test-message-id"}
        )
        return mock
    return _create_mock
