"""Provisioning engine: orchestrators, outputs, settings, and secrets."""

from infra_provisioner.engine.orchestrator import cancel, provision, show_settings, teardown
from infra_provisioner.engine.secrets import enrich_secrets

__all__ = ["cancel", "enrich_secrets", "provision", "show_settings", "teardown"]
