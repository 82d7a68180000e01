import aws_cdk as cdk
from config import get_config
from stacks.network_stack import NetworkStack
from stacks.service_stack import ServiceStack

app = cdk.App()
config = get_config(app)

env = cdk.Environment(account=config.account, region=config.region)

# =================================================================
# 1. NETWORK STACK
# =================================================================
# VPC and ECS cluster shared by every container service.
network_stack = NetworkStack(
    app, f"Network-{config.name}",
    config=config,
    env=env
)

# =================================================================
# 2. SERVICE STACK
# =================================================================
# Public HTTPS load balancer, DNS record and the routed Fargate services.
if config.services:
    service_stack = ServiceStack(
        app, f"Services-{config.name}",
        config=config,
        vpc=network_stack.vpc,
        cluster=network_stack.cluster,
        env=env
    )
    service_stack.add_dependency(network_stack)
    print(f"🌐 Public endpoint: https://{config.host_name}.{config.domain_name}")
else:
    print(f"⏭️ Skipping ServiceStack: no services configured ({config.name.upper()}_SERVICES is empty)")

app.synth()
