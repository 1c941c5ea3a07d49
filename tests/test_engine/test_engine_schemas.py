"""Tests for engine schemas and the merge rule."""

from aimud.engine.schemas import (
    CheckDefinition,
    EngineResponse,
    FileMutation,
    StructuredResponse,
    UpdateRecord,
    UpdateType,
)


class TestUpdateRecord:
    """Tests for UpdateRecord coercion."""

    def test_known_type(self):
        assert UpdateRecord(type="stat", text="Health -10", value=-10).type == UpdateType.STAT

    def test_type_is_case_insensitive(self):
        assert UpdateRecord(type="ITEM").type == UpdateType.ITEM

    def test_unknown_type_becomes_misc(self):
        assert UpdateRecord(type="weather", text="Rain starts").type == UpdateType.MISC

    def test_nulls_default(self):
        update = UpdateRecord(type=None, text=None, value=None)
        assert update.type == UpdateType.MISC
        assert update.text == ""
        assert update.value == 0


class TestFileMutations:
    """Tests for StructuredResponse.file_mutations."""

    def test_bare_string(self):
        parsed = StructuredResponse(files={"Player.txt": "Health: 100"})
        assert parsed.file_mutations() == {"Player.txt": FileMutation(content="Health: 100")}

    def test_object_with_display_name(self):
        parsed = StructuredResponse.model_validate(
            {"files": {"KingsGuard_1.txt": {"content": "Armed", "displayName": "King's Guard"}}}
        )
        mutation = parsed.file_mutations()["KingsGuard_1.txt"]
        assert mutation.content == "Armed"
        assert mutation.display_name == "King's Guard"

    def test_empty_content_is_kept(self):
        parsed = StructuredResponse(files={"Empty.txt": ""})
        assert parsed.file_mutations()["Empty.txt"].content == ""

    def test_malformed_entries_are_dropped(self):
        parsed = StructuredResponse(
            files={
                "Good.txt": "ok",
                "NoContent.txt": {"displayName": "Nothing"},
                "Null.txt": None,
                "Number.txt": 42,
            }
        )
        assert list(parsed.file_mutations()) == ["Good.txt"]

    def test_preserves_backend_order(self):
        parsed = StructuredResponse(files={"B.txt": "b", "A.txt": "a"})
        assert list(parsed.file_mutations()) == ["B.txt", "A.txt"]


class TestMerge:
    """Tests for EngineResponse.merge."""

    def test_narrative_overwritten_when_present(self):
        first = EngineResponse().merge(StructuredResponse(narrative="First"), {})
        second = first.merge(StructuredResponse(narrative="Second"), {})
        assert second.narrative == "Second"

    def test_absent_narrative_keeps_previous(self):
        first = EngineResponse().merge(StructuredResponse(narrative="First"), {})
        second = first.merge(StructuredResponse(), {})
        assert second.narrative == "First"

    def test_empty_narrative_overwrites(self):
        first = EngineResponse().merge(StructuredResponse(narrative="First"), {})
        assert first.merge(StructuredResponse(narrative=""), {}).narrative == ""

    def test_updates_accumulate_in_order(self):
        a = UpdateRecord(type="stat", text="Energy -5", value=-5)
        b = UpdateRecord(type="time", text="+30s", value=30)
        merged = (
            EngineResponse()
            .merge(StructuredResponse(updates=[a]), {})
            .merge(StructuredResponse(updates=[b]), {})
        )
        assert merged.updates == [a, b]

    def test_files_last_write_wins(self):
        merged = (
            EngineResponse()
            .merge(StructuredResponse(), {"Player.txt": FileMutation(content="v1")})
            .merge(StructuredResponse(), {"Player.txt": FileMutation(content="v2")})
        )
        assert merged.files["Player.txt"].content == "v2"

    def test_game_over_is_sticky(self):
        over = EngineResponse().merge(StructuredResponse(game_over=True), {})
        assert over.merge(StructuredResponse(game_over=False), {}).game_over is True

    def test_pending_checks_follow_latest_reply(self):
        check = CheckDefinition(name="Climb", thresholds={"Success": 400})
        pending = EngineResponse().merge(StructuredResponse(checks=[check]), {})
        assert pending.pending_checks == [check]
        assert pending.merge(StructuredResponse(), {}).pending_checks == []

    def test_merge_does_not_mutate(self):
        base = EngineResponse(narrative="Base")
        base.merge(StructuredResponse(narrative="New"), {})
        assert base.narrative == "Base"
