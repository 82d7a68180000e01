import os
from typing import List, Optional
import tldextract
from dotenv import load_dotenv
from aws_cdk import RemovalPolicy

# Load environment variables from a .env file
load_dotenv()

# Offline extractor: only the bundled public suffix snapshot is used
_extract = tldextract.TLDExtract(suffix_list_urls=())


class ServiceConfig:
    """
    Describes one container service routed through the load balancer.
    """
    def __init__(
        self,
        name: str,
        image: str,
        paths: List[str],
        priority: int,
        port: int = 80,
        health_check_path: Optional[str] = None,
        cpu: int = 256,
        memory_limit_mib: int = 512,
        desired_count: int = 1
    ):
        self.name = name
        self.image = image
        self.paths = paths
        self.priority = priority
        self.port = port
        self.health_check_path = health_check_path
        self.cpu = cpu
        self.memory_limit_mib = memory_limit_mib
        self.desired_count = desired_count


class EnvConfig:
    """
    Stores environment-specific configuration for the CDK stacks.
    """
    def __init__(
        self,
        env_name: str,
        account: str,
        region: str,
        host_name: str,
        domain: str,
        hosted_zone_id: str,
        allowed_cidrs: List[str],
        vpc_id: Optional[str] = None,
        services: Optional[List[ServiceConfig]] = None
    ):
        self.name = env_name
        self.account = account
        self.region = region
        self.host_name = host_name
        self.domain_name = domain
        self.hosted_zone_id = hosted_zone_id
        self.allowed_cidrs = allowed_cidrs
        self.vpc_id = vpc_id
        self.services = services or []

        # Log retention: keep container logs in 'prod', clean up elsewhere.
        if env_name == 'prod':
            self.removal_policy = RemovalPolicy.RETAIN
        else:
            self.removal_policy = RemovalPolicy.DESTROY


def get_required_env(key: str) -> str:
    """
    Retrieves a required environment variable or raises a RuntimeError if missing.
    """
    value = os.getenv(key)
    if not value:
        raise RuntimeError(f"❌ MISSING CONFIG: Required environment variable '{key}' not found in .env")
    return value


def get_int_env(key: str, default: Optional[int] = None) -> int:
    value = os.getenv(key)
    if not value:
        if default is None:
            raise RuntimeError(f"❌ MISSING CONFIG: Required environment variable '{key}' not found in .env")
        return default
    try:
        return int(value)
    except ValueError:
        raise RuntimeError(f"❌ INVALID CONFIG: '{key}' must be an integer, got '{value}'") from None


def split_list(value: Optional[str]) -> List[str]:
    """Splits a comma separated variable, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def split_host(domain: str, host: Optional[str]):
    """
    Resolves the (host label, zone name) pair.
    An explicit host label is used as-is against the given zone; otherwise the
    label is split off a fully qualified name (e.g. 'api.example.com').
    """
    if host:
        return host, domain

    extracted = _extract(domain)
    if not extracted.subdomain:
        raise RuntimeError(f"❌ INVALID CONFIG: cannot derive a host name from '{domain}', set HOST_NAME")
    return extracted.subdomain, f"{extracted.domain}.{extracted.suffix}"


def get_service_config(prefix: str, name: str) -> ServiceConfig:
    key = f"{prefix}_{name.upper().replace('-', '_')}"

    return ServiceConfig(
        name=name,
        image=get_required_env(f"{key}_IMAGE"),
        paths=split_list(get_required_env(f"{key}_PATHS")),
        priority=get_int_env(f"{key}_PRIORITY"),
        port=get_int_env(f"{key}_PORT", 80),
        health_check_path=os.getenv(f"{key}_HEALTH_CHECK_PATH"),
        cpu=get_int_env(f"{key}_CPU", 256),
        memory_limit_mib=get_int_env(f"{key}_MEMORY", 512),
        desired_count=get_int_env(f"{key}_DESIRED_COUNT", 1)
    )


def get_config(scope) -> EnvConfig:
    """
    Factory function to generate the EnvConfig object based on CDK context.
    Usage: cdk deploy -c env=prod
    """
    # Default to 'dev' environment if no context is provided
    env_name = scope.node.try_get_context("env") or "dev"
    prefix = env_name.upper()

    print(f"🔍 Initializing CDK Infrastructure for environment: {prefix}")

    # Load Mandatory Variables
    account = get_required_env(f"{prefix}_ACCOUNT")
    region = get_required_env(f"{prefix}_REGION")
    domain = get_required_env(f"{prefix}_DOMAIN_NAME")
    hosted_zone_id = get_required_env(f"{prefix}_HOSTED_ZONE_ID")

    # Load Optional Variables
    host_name, zone_name = split_host(domain, os.getenv(f"{prefix}_HOST_NAME"))
    vpc_id = os.getenv(f"{prefix}_VPC_ID")
    allowed_cidrs = split_list(os.getenv(f"{prefix}_ALLOWED_CIDRS")) or ["0.0.0.0/0"]

    services = [
        get_service_config(prefix, name)
        for name in split_list(os.getenv(f"{prefix}_SERVICES"))
    ]

    return EnvConfig(
        env_name=env_name,
        account=account,
        region=region,
        host_name=host_name,
        domain=zone_name,
        hosted_zone_id=hosted_zone_id,
        allowed_cidrs=allowed_cidrs,
        vpc_id=vpc_id,
        services=services
    )
