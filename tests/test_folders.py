"""
Tests for optional folder selection
"""

from unittest.mock import MagicMock

import httpx
import pytest

from oauth.errors import PortalRequestError, PortalUnauthorizedError
from portal.folders import SKIP_SELECTION, get_folders, select_folder

FOLDERS = [
    {"Key": "k1", "DisplayName": "Shared", "FullyQualifiedName": "Shared", "Id": 1},
    {"Key": "k2", "DisplayName": "Finance", "FullyQualifiedName": "Shared/Finance", "ParentId": 1},
]


def folder_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestGetFolders:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"PageItems": FOLDERS}, {"value": FOLDERS}])
    async def test_accepts_paged_and_odata_shapes(self, payload):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            return httpx.Response(200, json=payload)

        async with folder_client(handler) as client:
            folders = await get_folders("token", "cloud", "acme", "DefaultTenant", client=client)

        assert seen["url"] == (
            "https://cloud.uipath.com/acme/DefaultTenant/orchestrator_/api/Folders/GetAllForCurrentUser"
        )
        assert [f.key for f in folders] == ["k1", "k2"]
        assert folders[1].fully_qualified_name == "Shared/Finance"
        assert folders[1].parent_id == 1

    @pytest.mark.asyncio
    async def test_unexpected_shape_returns_empty_list(self):
        async with folder_client(lambda request: httpx.Response(200, json={"items": []})) as client:
            assert await get_folders("token", "cloud", "acme", "t", client=client) == []

    @pytest.mark.asyncio
    async def test_401_raises_unauthorized(self):
        async with folder_client(lambda request: httpx.Response(401)) as client:
            with pytest.raises(PortalUnauthorizedError):
                await get_folders("token", "cloud", "acme", "t", client=client)


class TestSelectFolder:
    @pytest.mark.asyncio
    async def test_returns_selected_key(self):
        prompt = MagicMock(return_value="k2")
        async with folder_client(lambda request: httpx.Response(200, json={"PageItems": FOLDERS})) as client:
            key = await select_folder("token", "cloud", "acme", "t", prompt=prompt, client=client)

        assert key == "k2"
        title, choices = prompt.call_args.args
        assert choices[0] == ("Shared (Shared)", "k1")
        assert choices[-1][1] == SKIP_SELECTION

    @pytest.mark.asyncio
    async def test_skip_returns_none(self):
        prompt = MagicMock(return_value=SKIP_SELECTION)
        async with folder_client(lambda request: httpx.Response(200, json={"value": FOLDERS})) as client:
            assert await select_folder("token", "cloud", "acme", "t", prompt=prompt, client=client) is None

    @pytest.mark.asyncio
    async def test_failures_return_none_without_prompting(self):
        prompt = MagicMock()
        async with folder_client(lambda request: httpx.Response(500)) as client:
            assert await select_folder("token", "cloud", "acme", "t", prompt=prompt, client=client) is None
        prompt.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_tenant_returns_none(self):
        prompt = MagicMock()
        async with folder_client(lambda request: httpx.Response(200, json={"value": []})) as client:
            assert await select_folder("token", "cloud", "acme", "t", prompt=prompt, client=client) is None
        prompt.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_entries_raise_from_lookup(self):
        async with folder_client(lambda request: httpx.Response(200, json={"value": [{"Key": "k"}]})) as client:
            with pytest.raises(PortalRequestError):
                await get_folders("token", "cloud", "acme", "t", client=client)
