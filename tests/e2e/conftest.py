"""Fixtures specific to end-to-end tests."""

import pytest
from unittest.mock import Mock


@pytest.fixture(autouse=True)
def _mark_as_e2e(request):
    """Automatically mark all tests in e2e/ as e2e tests."""
    request.node.add_marker(pytest.mark.e2e)


@pytest.fixture
def mock_lambda_context():
    """Create a mock Lambda context object."""
    context = Mock()
    context.function_name = "test-function"
    context.function_version = "$LATEST"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-function"
    context.memory_limit_in_mb = 128
    context.aws_request_id = "test-request-id"
    context.log_group_name = "/aws/lambda/test-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test"
    context.get_remaining_time_in_millis = Mock(return_value=300000)
    return context
