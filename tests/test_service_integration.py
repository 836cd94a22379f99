"""End-to-end tests: RouterService over the reference Router."""

from typing import Any

import pytest

from plover.errors import UnrecognizedRoute
from plover.routing.query import DEFAULT_VALUE
from plover.routing.router import Router
from plover.service import RouterService


class _Post:
    def __init__(self, id: int) -> None:
        self.id = id


class TestTransitions:
    @pytest.mark.asyncio
    async def test_by_name(self, service: RouterService) -> None:
        await service.transition_to("blog.post", 7)
        assert service.current_route_name == "blog.post"
        assert service.current_url == "/blog/7"

    @pytest.mark.asyncio
    async def test_by_url(self, service: RouterService) -> None:
        await service.transition_to("/blog/7?page=2")
        assert service.current_route_name == "blog.post"
        assert service.current_url == "/blog/7?page=2"

    @pytest.mark.asyncio
    async def test_by_hash_url(self, service: RouterService) -> None:
        await service.transition_to("#/about")
        assert service.current_route_name == "about"

    @pytest.mark.asyncio
    async def test_default_query_param_kept_in_url(self, service: RouterService) -> None:
        await service.transition_to("blog", {"query_params": {"page": 1}})
        assert service.current_url == "/blog?page=1"

    @pytest.mark.asyncio
    async def test_default_value_sentinel_not_kept_in_url(self, service: RouterService) -> None:
        await service.transition_to("blog", {"query_params": {"page": DEFAULT_VALUE}})
        assert service.current_url == "/blog"

    @pytest.mark.asyncio
    async def test_unsupplied_defaults_not_in_url(self, service: RouterService) -> None:
        await service.transition_to("blog")
        assert service.current_url == "/blog"

    @pytest.mark.asyncio
    async def test_unknown_route_does_not_raise_until_awaited(
        self, router: Router, service: RouterService,
    ) -> None:
        await router.start()
        transition = service.transition_to("nope")
        with pytest.raises(UnrecognizedRoute):
            await transition
        assert service.current_route_name == "index"

    @pytest.mark.asyncio
    async def test_replace_with(self, router: Router, service: RouterService) -> None:
        await router.start()
        transition = service.replace_with("about")
        assert transition.url_method == "replace"
        await transition
        assert router.history == ("#/about",)

    @pytest.mark.asyncio
    async def test_replace_with_url(self, router: Router, service: RouterService) -> None:
        await router.start()
        await service.replace_with("/about")
        assert router.history == ("#/about",)

    @pytest.mark.asyncio
    async def test_newer_call_supersedes(self, service: RouterService) -> None:
        first = service.transition_to("about")
        second = service.transition_to("blog.post", 3)
        await second
        assert first.is_aborted is True
        assert service.current_route_name == "blog.post"


class TestUrlFor:
    def test_default_valued_param_kept(self, service: RouterService) -> None:
        assert service.url_for("index", {"query_params": {"page": 0}}) == "#/?page=0"

    def test_default_value_sentinel_omits(self, service: RouterService) -> None:
        assert service.url_for("index", {"query_params": {"page": DEFAULT_VALUE}}) == "#/"

    def test_without_options(self, service: RouterService) -> None:
        assert service.url_for("index") == "#/"

    def test_models(self, service: RouterService) -> None:
        assert service.url_for("user.post", "u1", _Post(5)) == "#/users/u1/posts/5"

    def test_history_location(self, router_factory: Any) -> None:
        service = RouterService(router_factory(location="history", root_url="/my-root"))
        assert service.url_for("blog.post", 7) == "/my-root/blog/7"
        assert service.location == "history"
        assert service.root_url == "/my-root"

    @pytest.mark.asyncio
    async def test_url_for_does_not_change_state(self, router: Router, service: RouterService) -> None:
        await router.start()
        service.url_for("about")
        assert service.current_route_name == "index"
        assert router.history == ("#/",)

    @pytest.mark.asyncio
    async def test_segments_not_borrowed_from_inactive_route(self, service: RouterService) -> None:
        await service.transition_to("user.post", "u1", 5)
        with pytest.raises(ValueError, match="post_id"):
            service.url_for("blog.post")


class TestIsActive:
    @pytest.mark.asyncio
    async def test_route_and_ancestors(self, service: RouterService) -> None:
        await service.transition_to("blog.post", 7)
        assert service.is_active("blog.post") is True
        assert service.is_active("blog") is True
        assert service.is_active("about") is False
        assert service.is_active("blog.index") is False

    @pytest.mark.asyncio
    async def test_models(self, service: RouterService) -> None:
        await service.transition_to("blog.post", 7)
        assert service.is_active("blog.post", 7) is True
        assert service.is_active("blog.post", _Post(7)) is True
        assert service.is_active("blog.post", 8) is False

    @pytest.mark.asyncio
    async def test_query_params_ignored_when_not_given(self, service: RouterService) -> None:
        await service.transition_to("blog", {"query_params": {"page": 5}})
        assert service.is_active("blog") is True

    @pytest.mark.asyncio
    async def test_query_params_match(self, service: RouterService) -> None:
        await service.transition_to("blog", {"query_params": {"page": 5}})
        assert service.is_active("blog", {"query_params": {"page": 5}}) is True
        assert service.is_active("blog", {"query_params": {"page": 6}}) is False
        assert service.is_active("blog", {"query_params": {"page": 5, "sort": "new"}}) is True
        assert service.is_active("blog", {"query_params": {"sort": "old"}}) is False

    @pytest.mark.asyncio
    async def test_query_params_default(self, service: RouterService) -> None:
        await service.transition_to("blog")
        assert service.is_active("blog", {"query_params": {"page": 1}}) is True
        assert service.is_active("blog", {"query_params": {"page": DEFAULT_VALUE}}) is True

    @pytest.mark.asyncio
    async def test_query_params_from_url(self, service: RouterService) -> None:
        await service.transition_to("/blog?page=3")
        assert service.is_active("blog", {"query_params": {"page": 3}}) is True
        assert service.is_active("blog", {"query_params": {"page": "3"}}) is True

    @pytest.mark.asyncio
    async def test_undeclared_query_param(self, service: RouterService) -> None:
        await service.transition_to("blog")
        assert service.is_active("blog", {"query_params": {"ref": "x"}}) is False

    @pytest.mark.asyncio
    async def test_is_active_has_no_side_effects(self, router: Router, service: RouterService) -> None:
        await service.transition_to("blog", {"query_params": {"page": 5}})
        before = router.state
        service.is_active("blog", {"query_params": {"page": 6}})
        assert router.state is before
        assert router.active_transition is None

    @pytest.mark.asyncio
    async def test_reads_settled_state_during_pending(self, service: RouterService) -> None:
        await service.transition_to("about")
        pending = service.transition_to("blog.post", 7)
        assert service.is_active("about") is True
        assert service.is_active("blog.post") is False
        await pending
        assert service.is_active("blog.post") is True

    def test_unknown_route(self, service: RouterService) -> None:
        assert service.is_active("nope") is False
