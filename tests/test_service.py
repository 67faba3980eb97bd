"""Tests for service layer."""

import uuid

import pytest

from shortener.errors import ConflictError, NotFoundError, ValidationError
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator


class ScriptedGenerator(ShortCodeGenerator):
    """Returns preset codes in order, to force collisions."""

    def __init__(self, codes):
        super().__init__(default_length=6)
        self.codes = list(codes)

    def generate_random(self, length=None):
        return self.codes.pop(0)


OWNER = str(uuid.uuid4())
OTHER = str(uuid.uuid4())


@pytest.mark.asyncio
class TestURLShortenerService:
    """Test the code registry."""

    async def test_create_generates_code(self, service, sample_urls):
        link = await service.create_short_url(sample_urls[0], OWNER)

        assert len(link.code) == 6
        assert ShortCodeGenerator.is_valid_format(link.code)
        assert link.target_url == sample_urls[0]
        assert link.owner_id == OWNER
        assert uuid.UUID(link.id)

    async def test_generated_codes_are_unique(self, service, sample_urls):
        codes = [(await service.create_short_url(sample_urls[0], OWNER)).code for _ in range(50)]

        assert len(set(codes)) == 50

    async def test_create_with_requested_code(self, service, sample_urls):
        link = await service.create_short_url(sample_urls[0], OWNER, requested_code="test123")

        assert link.code == "test123"

    async def test_requested_code_is_used_verbatim(self, service, sample_urls):
        # Character policy belongs to the request layer
        link = await service.create_short_url(sample_urls[0], OWNER, requested_code="x")

        assert link.code == "x"

    async def test_duplicate_code_conflicts_for_any_user(self, service, sample_urls):
        await service.create_short_url(sample_urls[0], OWNER, requested_code="duplicate")

        with pytest.raises(ConflictError, match="already exists"):
            await service.create_short_url(sample_urls[1], OWNER, requested_code="duplicate")
        with pytest.raises(ConflictError):
            await service.create_short_url(sample_urls[1], OTHER, requested_code="duplicate")

    async def test_generated_collision_is_retried(self, test_db, logger, sample_urls):
        service = URLShortenerService(
            db=test_db,
            short_code_generator=ScriptedGenerator(["taken1", "taken1", "taken1", "fresh1"]),
            logger=logger,
        )
        await service.create_short_url(sample_urls[0], OWNER)

        link = await service.create_short_url(sample_urls[1], OWNER)

        assert link.code == "fresh1"

    async def test_generated_collision_gives_up(self, test_db, logger, sample_urls):
        service = URLShortenerService(
            db=test_db,
            short_code_generator=ScriptedGenerator(["taken1"] * 4),
            logger=logger,
            max_collision_retries=2,
        )
        await service.create_short_url(sample_urls[0], OWNER)

        with pytest.raises(ConflictError, match="Unable to generate"):
            await service.create_short_url(sample_urls[1], OWNER)

    async def test_requested_code_is_not_retried(self, test_db, logger, sample_urls):
        generator = ScriptedGenerator(["unused"])
        service = URLShortenerService(db=test_db, short_code_generator=generator, logger=logger)
        await service.create_short_url(sample_urls[0], OWNER, requested_code="mine")

        with pytest.raises(ConflictError):
            await service.create_short_url(sample_urls[1], OWNER, requested_code="mine")
        assert generator.codes == ["unused"]

    async def test_create_requires_url_and_owner(self, service):
        with pytest.raises(ValidationError):
            await service.create_short_url("", OWNER)
        with pytest.raises(ValidationError):
            await service.create_short_url("https://example.com", "")

    async def test_resolve_round_trip(self, service, sample_urls):
        link = await service.create_short_url(sample_urls[0], OWNER)

        resolved = await service.resolve(link.code)

        assert resolved.target_url == sample_urls[0]
        assert resolved.id == link.id

    async def test_resolve_is_case_sensitive(self, service, sample_urls):
        await service.create_short_url(sample_urls[0], OWNER, requested_code="AbCd")

        with pytest.raises(NotFoundError):
            await service.resolve("abcd")

    async def test_resolve_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.resolve("nonexistent")

    async def test_list_by_owner(self, service, sample_urls):
        first = await service.create_short_url(sample_urls[0], OWNER)
        await service.create_short_url(sample_urls[1], OTHER)
        second = await service.create_short_url(sample_urls[2], OWNER)

        links = await service.list_by_owner(OWNER)

        assert [link.id for link in links] == [first.id, second.id]
        assert await service.list_by_owner(str(uuid.uuid4())) == []

    async def test_delete_by_other_user_is_not_found(self, service, sample_urls):
        link = await service.create_short_url(sample_urls[0], OWNER)

        with pytest.raises(NotFoundError):
            await service.delete_owned(link.id, OTHER)

        assert (await service.resolve(link.code)).id == link.id

    async def test_delete_succeeds_exactly_once(self, service, sample_urls):
        link = await service.create_short_url(sample_urls[0], OWNER)

        deleted = await service.delete_owned(link.id, OWNER)
        assert deleted.target_url == sample_urls[0]

        with pytest.raises(NotFoundError):
            await service.delete_owned(link.id, OWNER)
        with pytest.raises(NotFoundError):
            await service.resolve(link.code)

    async def test_deleted_code_can_be_reused(self, service, sample_urls):
        link = await service.create_short_url(sample_urls[0], OWNER, requested_code="again")
        await service.delete_owned(link.id, OWNER)

        link = await service.create_short_url(sample_urls[1], OTHER, requested_code="again")

        assert link.owner_id == OTHER

    async def test_delete_malformed_id(self, service):
        with pytest.raises(NotFoundError):
            await service.delete_owned("not-a-uuid", OWNER)

    async def test_delete_accepts_any_uuid_spelling(self, service, sample_urls):
        link = await service.create_short_url(sample_urls[0], OWNER)

        deleted = await service.delete_owned("{" + link.id.upper() + "}", OWNER)

        assert deleted.id == link.id
        with pytest.raises(NotFoundError):
            await service.resolve(link.code)

    async def test_health_check(self, service):
        health = await service.health_check()

        assert health == {"database": True, "overall": True}
