# site_deployer/services/__init__.py
"""Business logic services for site-deployer"""

from .deploy_service import DeployService

__all__ = [
    "DeployService",
]
