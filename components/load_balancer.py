from typing import List, Optional
import jsii
from aws_cdk import (
    Duration,
    aws_certificatemanager as acm,
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_elasticloadbalancingv2 as elbv2,
    aws_route53 as route53,
    aws_route53_targets as targets,
)
from constructs import Construct


@jsii.implements(ec2.IConnectable)
class LoadBalancer(Construct):
    """
    Public HTTPS entry point bound to a DNS name:
    1. Security Group and internet-facing Application Load Balancer.
    2. ACM Certificate for '<host>.<domain>' validated through Route53.
    3. A single HTTPS listener on port 443.
    4. Route53 alias record pointing the host label at the load balancer.

    Backend services are attached afterwards with `add_target`.
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        vpc: ec2.IVpc,
        allowed_cidrs: List[str],
        host_name: str,
        domain_name: str,
        hosted_zone_id: str,
    ) -> None:
        super().__init__(scope, construct_id)

        self._vpc = vpc
        self._allowed_cidrs = list(allowed_cidrs)

        # =================================================================
        # 1. SECURITY GROUP & LOAD BALANCER
        # =================================================================
        security_group = ec2.SecurityGroup(self, "SecurityGroup", vpc=vpc)

        self._lb = elbv2.ApplicationLoadBalancer(self, "LoadBalancer",
            vpc=vpc,
            security_group=security_group,
            internet_facing=True
        )

        # =================================================================
        # 2. CERTIFICATE (DNS validated)
        # =================================================================
        hosted_zone = route53.HostedZone.from_hosted_zone_attributes(self, "HostedZone",
            hosted_zone_id=hosted_zone_id,
            zone_name=domain_name
        )

        host = f"{host_name}.{domain_name}"
        certificate = acm.Certificate(self, "Certificate",
            domain_name=host,
            validation=acm.CertificateValidation.from_dns(hosted_zone)
        )

        # =================================================================
        # 3. HTTPS LISTENER
        # =================================================================
        # 404 placeholder until the first target becomes the default
        self._listener = self._lb.add_listener("Listener",
            port=443,
            open=True,
            certificates=[elbv2.ListenerCertificate.from_certificate_manager(certificate)],
            default_action=elbv2.ListenerAction.fixed_response(
                status_code=404,
                content_type="text/plain",
                message_body="Not Found"
            )
        )

        # =================================================================
        # 4. DNS ALIAS
        # =================================================================
        route53.ARecord(self, "ARecord",
            zone=hosted_zone,
            target=route53.RecordTarget.from_alias(targets.LoadBalancerTarget(self._lb)),
            record_name=host_name
        )

        self._url = f"https://{host}"
        self._connections = security_group.connections

    @property
    def url(self) -> str:
        return self._url

    @property
    def connections(self) -> ec2.Connections:
        return self._connections

    @property
    def allowed_cidrs(self) -> List[str]:
        # Not applied to ingress rules
        return list(self._allowed_cidrs)

    def add_target(
        self,
        service: ecs.BaseService,
        port: int,
        paths: List[str],
        priority: int,
        health_check_path: Optional[str] = None,
    ) -> None:
        """
        Routes requests matching `paths` to `service` through a new target group.
        The group also becomes the listener default, so the latest target
        receives requests no rule matches.
        `priority` must be unique on the listener; it also names the created resources.
        """
        target_group = elbv2.ApplicationTargetGroup(self, f"AlbTarget-priority-{priority}",
            vpc=self._vpc,
            port=port,
            protocol=elbv2.ApplicationProtocol.HTTP,
            targets=[service],
            health_check=elbv2.HealthCheck(
                enabled=True,
                interval=Duration.seconds(30),
                timeout=Duration.seconds(10),
                unhealthy_threshold_count=6,
                path=health_check_path or "/",
                healthy_http_codes="200-399"
            )
        )

        self._listener.add_action(f"Action-priority-{priority}",
            priority=priority,
            conditions=[elbv2.ListenerCondition.path_patterns(paths)],
            action=elbv2.ListenerAction.forward([target_group])
        )

        self._listener.add_target_groups(f"Default-priority-{priority}",
            target_groups=[target_group]
        )
