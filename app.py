#!/usr/bin/env python3
"""CDK app for the EC2 Runtime Checker Lambda."""

import os
import aws_cdk as cdk
from stacks.runtime_checker_stack import RuntimeCheckerStack

app = cdk.App()

RuntimeCheckerStack(
    app,
    "EC2RuntimeCheckerStack",
    description="Terminates EC2 instances that exceed policy-defined runtime limits",
    env=cdk.Environment(
        account=os.getenv('CDK_DEFAULT_ACCOUNT'),
        region=os.getenv('CDK_DEFAULT_REGION', 'us-east-2')
    ),
    tags={
        "ManagedBy": "CDK",
    }
)

app.synth()
