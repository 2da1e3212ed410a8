"""
OAuth discovery metadata (RFC 8414 + RFC 9728)

The MCP client never receives tokens from this server: access is granted
by completing the Google browser flow once. The metadata only tells MCP
clients where that flow starts.
"""

import logging
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class MetadataConfig:
    """Discovery metadata configuration"""
    server_url: str
    realm: str = "YouTube MCP Server"
    scopes_supported: List[str] = field(default_factory=lambda: ["youtube:tools"])


class OAuthMetadataProvider:
    """
    Serves the static discovery documents for this server

    Implements:
    - RFC 8414: OAuth 2.0 Authorization Server Metadata
    - RFC 9728: OAuth 2.0 Protected Resource Metadata
    - RFC 6750: WWW-Authenticate challenge for unauthenticated requests
    """

    def __init__(self, config: MetadataConfig):
        self.config = config
        self.server_url = config.server_url.rstrip("/")

    def get_authorization_server_metadata(self) -> Dict[str, Any]:
        """
        Get OAuth Authorization Server Metadata (RFC 8414)

        Served at /.well-known/oauth-authorization-server
        """
        return {
            "issuer": self.server_url,
            "authorization_endpoint": f"{self.server_url}/oauth/authorize",
            "token_endpoint": f"{self.server_url}/oauth/token",
            "scopes_supported": self.config.scopes_supported,
            "response_types_supported": ["code"],
            "grant_types_supported": ["authorization_code"],
        }

    def get_protected_resource_metadata(self) -> Dict[str, Any]:
        """
        Get OAuth Protected Resource Metadata (RFC 9728)

        Served at /.well-known/oauth-protected-resource
        """
        return {
            "resource": self.server_url,
            "authorization_servers": [self.server_url],
        }

    def generate_www_authenticate_header(
        self,
        error: Optional[str] = None,
        error_description: Optional[str] = None
    ) -> str:
        """
        Generate WWW-Authenticate header value (RFC 6750)

        Example:
            Bearer realm="YouTube MCP Server",
                   resource_metadata="http://localhost:8080/.well-known/oauth-protected-resource"
        """
        params = [
            f'realm="{self.config.realm}"',
            f'resource_metadata="{self.server_url}/.well-known/oauth-protected-resource"',
        ]

        if error:
            params.append(f'error="{error}"')

        if error_description:
            escaped_desc = error_description.replace('"', '\\"')
            params.append(f'error_description="{escaped_desc}"')

        return f"Bearer {', '.join(params)}"
