"""Unit tests for size calculation."""

from __future__ import annotations

import pytest

from recwire import Record, SchemaMismatchError, TypeRegistry, encode, encoded_size, field_sizes


class TestSizing:
    """Test encoded size helpers."""

    def test_encoded_size(self, flyte_registry: TypeRegistry) -> None:
        """Test the total matches the encoding."""
        HiveQuery = flyte_registry.record_class("flyteidl.plugins.HiveQuery")
        msg = HiveQuery(query="SELECT 1", timeout_sec=30)
        assert encoded_size(msg) == len(encode(msg)) == 12
        assert encoded_size(HiveQuery()) == 0

    def test_field_sizes(self, flyte_registry: TypeRegistry) -> None:
        """Test per-field contributions in field-number order."""
        HiveQuery = flyte_registry.record_class("flyteidl.plugins.HiveQuery")
        sizes = field_sizes(HiveQuery(query="SELECT 1", retryCount=300))
        assert sizes == {"query": 10, "timeout_sec": 0, "retryCount": 3}

    def test_sizes_add_up(self, Sample: type[Record], full_sample_values: dict) -> None:
        """Test field contributions sum to the total."""
        msg = Sample(**full_sample_values)
        assert sum(field_sizes(msg).values()) == encoded_size(msg)

    def test_not_a_record(self) -> None:
        """Test plain values are rejected."""
        with pytest.raises(SchemaMismatchError):
            field_sizes({"query": "x"})  # type: ignore[arg-type]
