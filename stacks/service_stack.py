from typing import Any
from aws_cdk import (
    Stack,
    CfnOutput,
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_logs as logs,
)
from constructs import Construct

from components.load_balancer import LoadBalancer

class ServiceStack(Stack):
    """
    Deploys the container services behind the public load balancer:
    1. LoadBalancer construct (ALB, certificate, HTTPS listener, DNS alias).
    2. One Fargate service per configured service, routed by path pattern.
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: Any,
        vpc: ec2.IVpc,
        cluster: ecs.ICluster,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # 1. PUBLIC ENTRY POINT
        # =================================================================
        self.load_balancer = LoadBalancer(self, "LoadBalancer",
            vpc=vpc,
            allowed_cidrs=config.allowed_cidrs,
            host_name=config.host_name,
            domain_name=config.domain_name,
            hosted_zone_id=config.hosted_zone_id
        )

        # =================================================================
        # 2. CONTAINER SERVICES
        # =================================================================
        self.services = {}
        for service_config in config.services:
            name = service_config.name

            log_group = logs.LogGroup(self, f"{name}-Logs",
                retention=logs.RetentionDays.ONE_MONTH,
                removal_policy=config.removal_policy
            )

            task_definition = ecs.FargateTaskDefinition(self, f"{name}-Task",
                cpu=service_config.cpu,
                memory_limit_mib=service_config.memory_limit_mib
            )
            task_definition.add_container(f"{name}-Container",
                image=ecs.ContainerImage.from_registry(service_config.image),
                port_mappings=[ecs.PortMapping(container_port=service_config.port)],
                logging=ecs.LogDrivers.aws_logs(stream_prefix=name, log_group=log_group)
            )

            service = ecs.FargateService(self, f"{name}-Service",
                cluster=cluster,
                task_definition=task_definition,
                desired_count=service_config.desired_count,
                vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS)
            )

            # Routing
            self.load_balancer.add_target(
                service,
                service_config.port,
                service_config.paths,
                service_config.priority,
                service_config.health_check_path
            )
            self.services[name] = service

        # =================================================================
        # 3. OUTPUTS
        # =================================================================
        CfnOutput(self, "Url", value=self.load_balancer.url)
