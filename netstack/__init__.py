"""
Pulumi infrastructure-as-code for a single-VPC web application topology.

This package defines AWS infrastructure including:
- VPC with one public and one private subnet per availability zone (up to 3)
- Internet gateway and public/private route tables
- Security groups for the application instance and the database
- RDS MariaDB instance in the private subnets
- EC2 instance with IAM instance profile and SSH key pair
- Route53 A record for the instance
"""
