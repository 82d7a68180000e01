from aws_cdk import (
    Stack,
    aws_ec2 as ec2,
    aws_ecs as ecs,
)
from constructs import Construct

class NetworkStack(Stack):
    """
    Shared networking for the container services:
    1. VPC (imported by id when configured, otherwise created).
    2. ECS Cluster hosting the Fargate services.
    """
    def __init__(self, scope: Construct, construct_id: str, config, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # 1. VPC
        # =================================================================
        # Lookups need an explicit account/region on the stack env
        if config.vpc_id:
            self.vpc = ec2.Vpc.from_lookup(self, "Vpc", vpc_id=config.vpc_id)
        else:
            self.vpc = ec2.Vpc(self, "Vpc",
                max_azs=2,
                nat_gateways=1
            )

        # =================================================================
        # 2. ECS CLUSTER
        # =================================================================
        self.cluster = ecs.Cluster(self, "Cluster",
            vpc=self.vpc,
            container_insights=True
        )
