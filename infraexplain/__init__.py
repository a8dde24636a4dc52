"""InfraExplain: explain Terraform source through an external explanation service."""
