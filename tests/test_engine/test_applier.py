"""Tests for FileApplier."""

from aimud.engine.applier import FileApplier
from aimud.engine.schemas import FileMutation


class TestFileApplier:
    def test_writes_every_mutation(self, store):
        applied = FileApplier(store).apply(
            {
                "Player.txt": FileMutation(content="Health: 100"),
                "KingsGuard_1.txt": FileMutation(content="Armed", display_name="King's Guard"),
            }
        )

        assert set(applied) == {"Player.txt", "KingsGuard_1.txt"}
        assert store.read("Player.txt") == "Health: 100"
        assert store.get_display_name("KingsGuard_1.txt") == "King's Guard"

    def test_full_replacement(self, store):
        store.write("Player.txt", "Health: 100\nEnergy: 50")
        FileApplier(store).apply({"Player.txt": FileMutation(content="Health: 90")})
        assert store.read("Player.txt") == "Health: 90"

    def test_keeps_alias_when_none_given(self, store):
        store.write("KingsGuard_1.txt", "Armed", "King's Guard")
        FileApplier(store).apply({"KingsGuard_1.txt": FileMutation(content="Asleep")})
        assert store.get_display_name("KingsGuard_1.txt") == "King's Guard"

    def test_blank_name_is_skipped(self, store):
        applied = FileApplier(store).apply({"  ": FileMutation(content="nothing")})
        assert applied == {}
        assert len(store) == 0

    def test_no_mutations(self, store):
        assert FileApplier(store).apply({}) == {}
