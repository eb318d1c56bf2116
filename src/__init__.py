"""
Workload Identity Token Exchange - Azure AD bearer tokens from federated credentials.

Reads the projected Kubernetes service account token, exchanges it for an
Azure AD access token through an MSAL confidential client, and wraps the
result in a bearer authorizer for HTTP and Azure SDK clients.
"""

__version__ = "0.1.0"
