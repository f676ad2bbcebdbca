"""sshcon - browse and use the connections in your SSH config."""

__version__ = "0.1.0"
