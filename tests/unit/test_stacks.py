import aws_cdk as core
import aws_cdk.assertions as assertions
from aws_cdk import RemovalPolicy

from config import EnvConfig, ServiceConfig
from stacks.network_stack import NetworkStack
from stacks.service_stack import ServiceStack


def make_config(env_name="dev"):
    return EnvConfig(
        env_name=env_name,
        account="123456789012",
        region="eu-west-1",
        host_name="api",
        domain="example.com",
        hosted_zone_id="Z123456ABCDEFG",
        allowed_cidrs=["0.0.0.0/0"],
        services=[
            ServiceConfig(name="api", image="nginx", paths=["/api/*"], priority=10,
                          port=8080, health_check_path="/health"),
            ServiceConfig(name="web", image="nginx", paths=["/*"], priority=100),
        ]
    )


def synth(config):
    app = core.App()
    network = NetworkStack(app, "network", config=config)
    services = ServiceStack(app, "services",
        config=config,
        vpc=network.vpc,
        cluster=network.cluster
    )
    return assertions.Template.from_stack(network), assertions.Template.from_stack(services)


def test_network_stack_creates_vpc_and_cluster():
    network, _ = synth(make_config())

    network.resource_count_is("AWS::EC2::VPC", 1)
    network.resource_count_is("AWS::EC2::NatGateway", 1)
    network.has_resource_properties("AWS::ECS::Cluster", {
        "ClusterSettings": [{"Name": "containerInsights", "Value": "enabled"}]
    })


def test_service_stack_routes_each_service():
    _, services = synth(make_config())

    services.resource_count_is("AWS::ECS::Service", 2)
    services.resource_count_is("AWS::ElasticLoadBalancingV2::Listener", 1)
    services.resource_count_is("AWS::ElasticLoadBalancingV2::ListenerRule", 2)
    services.has_resource_properties("AWS::ElasticLoadBalancingV2::TargetGroup", {
        "Port": 8080,
        "HealthCheckPath": "/health",
        "TargetType": "ip"
    })
    services.has_resource_properties("AWS::ElasticLoadBalancingV2::TargetGroup", {
        "Port": 80,
        "HealthCheckPath": "/"
    })
    services.has_resource_properties("AWS::ElasticLoadBalancingV2::ListenerRule", {
        "Priority": 100,
        "Conditions": [{"Field": "path-pattern", "PathPatternConfig": {"Values": ["/*"]}}]
    })


def test_service_stack_outputs_url():
    _, services = synth(make_config())

    services.has_output("Url", {"Value": "https://api.example.com"})


def test_container_logs_follow_removal_policy():
    _, dev = synth(make_config("dev"))
    _, prod = synth(make_config("prod"))

    assert make_config("prod").removal_policy == RemovalPolicy.RETAIN
    dev.has_resource("AWS::Logs::LogGroup", {"DeletionPolicy": "Delete"})
    prod.has_resource("AWS::Logs::LogGroup", {"DeletionPolicy": "Retain"})


def test_network_stack_imports_configured_vpc():
    config = make_config()
    config.vpc_id = "vpc-0123456789abcdef0"
    app = core.App()
    network = NetworkStack(app, "network",
        config=config,
        env=core.Environment(account=config.account, region=config.region)
    )
    template = assertions.Template.from_stack(network)

    # Without cached context the lookup resolves to CDK's placeholder VPC
    assert network.vpc.vpc_id == "vpc-12345"
    template.resource_count_is("AWS::EC2::VPC", 0)
    template.resource_count_is("AWS::ECS::Cluster", 1)
