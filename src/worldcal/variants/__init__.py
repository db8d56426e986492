"""Variant overlays: derived calendars built from a base definition."""

from .resolver import default_variant_id, expand_variants, resolve_variant, variant_id_of

__all__ = ["default_variant_id", "expand_variants", "resolve_variant", "variant_id_of"]
