"""Property-based tests for the resource-access pipeline using Hypothesis."""

from dataclasses import dataclass

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from devcamper.domain.authorization import Action, Allow, Deny, authorize
from devcamper.domain.query import parse_query
from devcamper.domain.uploads import UploadedAsset, UploadRejection, validate_upload
from devcamper.repositories.memory import InMemoryStore
from devcamper.schemas.auth import Principal, Role
from devcamper.services.pagination import PaginationExecutor

hypothesis_settings = settings(
    max_examples=100,
    suppress_health_check=[HealthCheck.too_slow],
)

_FIELDS = st.sampled_from(["name", "tuition", "careers", "location.state"])
_OPERATORS = st.sampled_from(["", "[eq]", "[gt]", "[gte]", "[lt]", "[lte]", "[in]"])
_IDS = st.sampled_from(["u-1", "u-2", "u-3"])


@st.composite
def raw_query_params(draw) -> list[tuple[str, str]]:
    """Query-string pairs mixing filters with (possibly malformed) control keys."""
    params = [
        (f"{draw(_FIELDS)}{draw(_OPERATORS)}", draw(st.text(max_size=12)))
        for _ in range(draw(st.integers(min_value=0, max_value=6)))
    ]
    for key in ("select", "sort", "page", "limit"):
        if draw(st.booleans()):
            raw = draw(
                st.one_of(
                    st.text(max_size=8),
                    st.integers(min_value=-3, max_value=40).map(str),
                    st.integers(min_value=10**17, max_value=10**19).map(str),
                    st.tuples(st.sampled_from("0123456789"), st.integers(min_value=19, max_value=6000)).map(
                        lambda pair: pair[0] * pair[1]
                    ),
                    st.sampled_from(["-tuition", "name,-created_at", "title, tuition"]),
                )
            )
            params.append((key, raw))
    return draw(st.permutations(params))


@dataclass(frozen=True)
class _Resource:
    id: str
    owner_id: str


class TestQueryTranslatorProperties:
    @given(params=raw_query_params())
    @hypothesis_settings
    def test_translation_never_raises_and_keeps_paging_positive(self, params: list[tuple[str, str]]):
        descriptor = parse_query(params)

        assert descriptor.page_number >= 1
        assert descriptor.page_size >= 1
        assert descriptor.skip >= 0

    @given(params=raw_query_params())
    @hypothesis_settings
    def test_round_trip_reproduces_descriptor(self, params: list[tuple[str, str]]):
        descriptor = parse_query(params)

        assert parse_query(descriptor.to_params()) == descriptor


class TestPaginationProperties:
    @given(
        tuitions=st.lists(st.integers(min_value=0, max_value=20), max_size=25),
        threshold=st.integers(min_value=0, max_value=20),
        page=st.integers(min_value=1, max_value=6),
        limit=st.integers(min_value=1, max_value=6),
    )
    @hypothesis_settings
    def test_page_size_and_links_follow_total(self, tuitions: list[int], threshold: int, page: int, limit: int):
        store = InMemoryStore()
        for tuition in tuitions:
            store.courses.insert({"tuition": tuition})
        descriptor = parse_query(
            {"tuition[gte]": str(threshold), "sort": "-tuition", "page": str(page), "limit": str(limit)}
        )

        result = PaginationExecutor(store).execute(descriptor, store.courses)

        total = sum(1 for tuition in tuitions if tuition >= threshold)
        assert result.total == total
        assert result.count <= limit
        assert (result.next is not None) == (page * limit < total)
        assert (result.previous is not None) == (page > 1)
        values = [item["tuition"] for item in result.items]
        assert values == sorted(values, reverse=True)


class TestAuthorizationProperties:
    @given(
        principal_id=_IDS,
        owner_id=_IDS,
        role=st.sampled_from(list(Role)),
        action=st.sampled_from(list(Action)),
    )
    @hypothesis_settings
    def test_allow_iff_admin_or_owner(self, principal_id: str, owner_id: str, role: Role, action: Action):
        resource = _Resource(id=f"res-{owner_id}", owner_id=owner_id)

        decision = authorize(Principal(id=principal_id, role=role), resource, action)

        if role is Role.ADMIN or owner_id == principal_id:
            assert isinstance(decision, Allow)
        else:
            assert isinstance(decision, Deny)
            assert resource.id in decision.reason


class TestUploadProperties:
    @given(size=st.integers(min_value=0, max_value=10_000), max_size=st.integers(min_value=1, max_value=5_000))
    @hypothesis_settings
    def test_non_image_is_always_rejected(self, size: int, max_size: int):
        asset = UploadedAsset(original_name="notes.txt", mime_type="text/plain", size_bytes=size)

        assert validate_upload(asset, max_size, resource_id="b-1") is UploadRejection.NOT_AN_IMAGE

    @given(max_size=st.integers(min_value=1, max_value=5_000))
    @hypothesis_settings
    def test_image_size_boundary(self, max_size: int):
        at_limit = UploadedAsset(original_name="a.png", mime_type="image/png", size_bytes=max_size)
        over_limit = UploadedAsset(original_name="a.png", mime_type="image/png", size_bytes=max_size + 1)

        assert str(validate_upload(at_limit, max_size, resource_id="b-1")) == "photo_b-1.png"
        assert validate_upload(over_limit, max_size, resource_id="b-1") is UploadRejection.TOO_LARGE
