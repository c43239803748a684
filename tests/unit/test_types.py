"""
Unit tests for the index data model.
"""

import pytest

from mdb_reconciler.exceptions import ConfigurationError
from mdb_reconciler.indexes.types import (Collation, Index, IndexIdentity,
                                          IndexKey, IndexOptions)


@pytest.mark.unit
class TestIndexKey:
    """Test key type canonicalization."""

    @pytest.mark.parametrize(
        "declared, expected",
        [
            (1, "1"),
            (-1, "-1"),
            ("1", "1"),
            ("asc", "1"),
            ("Descending", "-1"),
            ("text", "text"),
            ("2dsphere", "2dsphere"),
        ],
    )
    def test_type_is_canonicalized(self, declared, expected):
        """Test integer and alias spellings map to the canonical tag."""
        assert IndexKey(field="a", type=declared).type == expected

    def test_unknown_type_is_kept(self):
        """Test unknown tags survive so the normalizer can decide."""
        assert IndexKey(field="a", type="geoHaystack").type == "geoHaystack"

    @pytest.mark.parametrize(
        "field, expected",
        [("", "$**"), ("attrs", "attrs.$**"), ("attrs.$**", "attrs.$**"), ("$**", "$**")],
    )
    def test_wildcard_field_gets_marker(self, field, expected):
        """Test wildcard keys always carry the $** path."""
        assert IndexKey(field=field, type="wildcard").field == expected

    def test_keys_are_hashable(self):
        """Test frozen keys can be used in sets."""
        assert len({IndexKey("a", "1"), IndexKey("a", 1)}) == 1


@pytest.mark.unit
class TestIndexIdentity:
    """Test identity parsing and rendering."""

    def test_from_import_id(self):
        """Test a valid import ID splits into three parts."""
        identity = IndexIdentity.from_import_id("app.events.events_idx")
        assert identity == IndexIdentity("app", "events", "events_idx")
        assert identity.import_id == "app.events.events_idx"
        assert str(identity) == "app.events.events_idx"

    @pytest.mark.parametrize(
        "import_id", ["app.events", "app.events.idx.extra", "app..idx", "", "..."]
    )
    def test_from_import_id_rejects_malformed(self, import_id):
        """Test malformed import IDs raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="database.collection.index_name") as exc:
            IndexIdentity.from_import_id(import_id)
        assert exc.value.config_key == "import_id"


@pytest.mark.unit
class TestCollation:
    """Test the collation sub-record."""

    def test_to_document_omits_unset(self):
        """Test only set knobs are emitted, with server names."""
        collation = Collation(locale="en", strength=2, numeric_ordering=False)
        assert collation.to_document() == {
            "locale": "en",
            "strength": 2,
            "numericOrdering": False,
        }

    def test_from_document_keeps_present_fields(self):
        """Test unknown server fields are ignored."""
        collation = Collation.from_document(
            {"locale": "fr", "caseFirst": "upper", "normalization": False, "version": "57.1"}
        )
        assert collation == Collation(locale="fr", case_first="upper")


@pytest.mark.unit
class TestIndex:
    """Test Index convenience properties."""

    def test_defaults_are_unset(self):
        """Test every option starts unset."""
        options = IndexOptions()
        assert all(value is None for value in vars(options).values())

    def test_properties(self, identity):
        """Test identity shortcuts and kind detection."""
        index = Index(identity=identity, keys=[IndexKey("loc", "2dsphere"), IndexKey("a", "1")])
        assert index.name == "events_idx"
        assert index.database == "app"
        assert index.collection == "events"
        assert index.kind == "2dsphere"
