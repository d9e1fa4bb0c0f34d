"""Helm chart templates and values from Kubernetes pod specs, cert-manager resources and webhook configurations."""

__version__ = "0.1.0"
__all__ = ["yamlfmt", "security_context", "pod", "webhook_cert", "webhook_config"]