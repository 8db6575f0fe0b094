import pytest
from pydantic import ValidationError

from catalog_store.clients import DiffParams, GetDiffBuilder


class RecordingApi:
    def __init__(self):
        self.calls = []

    def get_diff(self, params):
        self.calls.append(params)
        return {"diffs": []}


def test_forwards_all_fields():
    api = RecordingApi()
    response = (
        GetDiffBuilder(api)
        .from_ref("main")
        .from_hash_on_ref("abcd1234")
        .to_ref("feature")
        .to_hash_on_ref("ef567890")
        .get()
    )

    assert response == {"diffs": []}
    assert api.calls == [
        DiffParams(from_ref="main", from_hash_on_ref="abcd1234", to_ref="feature", to_hash_on_ref="ef567890")
    ]


def test_hashes_are_optional():
    api = RecordingApi()
    GetDiffBuilder(api).from_ref("main").to_ref("dev").get()
    params = api.calls[0]
    assert params.from_hash_on_ref is None
    assert params.to_hash_on_ref is None


@pytest.mark.parametrize("missing", ["from_ref", "to_ref"])
def test_refs_are_required(missing):
    api = RecordingApi()
    builder = GetDiffBuilder(api).from_ref("main").to_ref("dev")
    getattr(builder, missing)(None)
    with pytest.raises(ValidationError):
        builder.get()
    assert api.calls == []


def test_empty_ref_name_is_rejected():
    with pytest.raises(ValidationError):
        GetDiffBuilder(RecordingApi()).from_ref("").to_ref("dev").params()


def test_params_are_immutable():
    params = DiffParams(from_ref="a", to_ref="b")
    with pytest.raises(ValidationError):
        params.from_ref = "c"
