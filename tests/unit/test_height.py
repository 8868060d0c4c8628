"""Tests for Height and ChainId"""
import pytest

from src.core.errors import HeightError
from src.core.height import U64_MAX, ChainId, Height


class TestHeight:

    def test_new_valid(self):
        height = Height.new(4, 100)
        assert height.revision_number == 4
        assert height.revision_height == 100
        assert str(height) == "4-100"

    def test_zero_height_rejected(self):
        with pytest.raises(HeightError) as exc_info:
            Height.new(1, 0)
        assert exc_info.value.revision_height == 0

    @pytest.mark.parametrize("revision_number, revision_height", [
        (-1, 10),
        (U64_MAX + 1, 10),
        (1, -5),
        (1, U64_MAX + 1),
    ])
    def test_out_of_range_rejected(self, revision_number, revision_height):
        with pytest.raises(HeightError):
            Height.new(revision_number, revision_height)

    def test_non_integer_rejected(self):
        with pytest.raises(HeightError):
            Height.new(1, "10")
        with pytest.raises(HeightError):
            Height.new(True, 10)

    def test_bounds_accepted(self):
        assert Height.new(U64_MAX, U64_MAX).revision_height == U64_MAX
        assert Height.new(0, 1).revision_number == 0

    def test_ordering(self):
        assert Height(1, 100) < Height(1, 101)
        assert Height(1, 999) < Height(2, 1)
        assert Height(3, 5) >= Height(3, 5)


class TestChainId:

    @pytest.mark.parametrize("chain_id, version", [
        ("cosmoshub-4", 4),
        ("osmosis-1", 1),
        ("ibc-0", 0),
        ("my-test-chain-12", 12),
        ("localnet", 0),
        ("chain-01", 0),
        ("-5", 0),
    ])
    def test_version(self, chain_id, version):
        assert ChainId(chain_id).version == version

    def test_from_parts(self):
        chain = ChainId.from_parts("juno", 3)
        assert chain.id == "juno-3"
        assert chain.version == 3
        assert chain.name == "juno"
        assert str(chain) == "juno-3"

    def test_name_without_version(self):
        assert ChainId("localnet").name == "localnet"
