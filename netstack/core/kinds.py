"""
Resource kinds and well-known node names.

Kinds are Pulumi type tokens of the ``pulumi_aws`` resources the graph
declares.
"""

import enum
from typing import Final


class ResourceKind(str, enum.Enum):
    VPC = "aws:ec2/vpc:Vpc"
    INTERNET_GATEWAY = "aws:ec2/internetGateway:InternetGateway"
    INTERNET_GATEWAY_ATTACHMENT = "aws:ec2/internetGatewayAttachment:InternetGatewayAttachment"
    SUBNET = "aws:ec2/subnet:Subnet"
    ROUTE_TABLE = "aws:ec2/routeTable:RouteTable"
    ROUTE_TABLE_ASSOCIATION = "aws:ec2/routeTableAssociation:RouteTableAssociation"
    ROUTE = "aws:ec2/route:Route"
    SECURITY_GROUP = "aws:ec2/securityGroup:SecurityGroup"
    KEY_PAIR = "aws:ec2/keyPair:KeyPair"
    INSTANCE = "aws:ec2/instance:Instance"
    DB_PARAMETER_GROUP = "aws:rds/parameterGroup:ParameterGroup"
    DB_SUBNET_GROUP = "aws:rds/subnetGroup:SubnetGroup"
    DB_INSTANCE = "aws:rds/instance:Instance"
    IAM_ROLE = "aws:iam/role:Role"
    IAM_ROLE_POLICY_ATTACHMENT = "aws:iam/rolePolicyAttachment:RolePolicyAttachment"
    IAM_INSTANCE_PROFILE = "aws:iam/instanceProfile:InstanceProfile"
    DNS_RECORD = "aws:route53/record:Record"


# Node names
VPC: Final[str] = "vpc"
INTERNET_GATEWAY: Final[str] = "internet-gateway"
INTERNET_GATEWAY_ATTACHMENT: Final[str] = "internet-gateway-attachment"
PUBLIC_ROUTE: Final[str] = "public-route"
APP_SECURITY_GROUP: Final[str] = "app-security-group"
DB_SECURITY_GROUP: Final[str] = "db-security-group"
KEY_PAIR: Final[str] = "key-pair"
DB_PARAMETER_GROUP: Final[str] = "db-parameter-group"
DB_SUBNET_GROUP: Final[str] = "db-subnet-group"
DATABASE: Final[str] = "database"
INSTANCE_ROLE: Final[str] = "instance-role"
INSTANCE_PROFILE: Final[str] = "instance-profile"
INSTANCE: Final[str] = "instance"
DNS_RECORD: Final[str] = "dns-record"
