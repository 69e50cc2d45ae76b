"""
Shared fixtures for the design-system MCP server tests.
"""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from pydantic import BaseModel, Field

from design_mcp.base import ExecutionError, mcp_tool, text_result
from design_mcp.catalog import ComponentLayout, RegistryConfig, RegistryService
from design_mcp.registry import ToolRegistry
from design_mcp.tools import RegistryTools


# ========== Registry Fixtures ==========

def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def layout() -> ComponentLayout:
    """Component layout rooted at ``src`` inside the workspace."""
    return ComponentLayout(
        base_path="src",
        component_dir="components",
        component_sub_dirs=["ui"],
        doc_extensions=[".md", ".mdx"],
        examples_dir="stories",
        examples_sub_dirs=["basic"],
        example_extensions=[".stories.js", ".stories.tsx"],
    )


@pytest.fixture
def registry_config(layout) -> RegistryConfig:
    return RegistryConfig(
        name="TestRegistry",
        install_command="npm install test-registry",
        description="A test registry",
        use_cases=["Testing"],
        components=layout,
    )


@pytest.fixture
def demo_workspace(tmp_path) -> Path:
    """
    Workspace with a ``Demo`` registry:
    - ``Button`` with a readme and a dedicated stories folder
    - ``Empty`` without any documentation file
    """
    components = tmp_path / "src" / "components" / "ui"
    write_file(components / "Button" / "readme.md", "# Button\n\nClick me.")
    write_file(components / "Empty" / "notes.txt", "not documentation")
    write_file(
        tmp_path / "src" / "stories" / "basic" / "Button" / "Button.stories.js",
        "export default { title: 'Button' };",
    )
    return tmp_path


@pytest.fixture
def demo_config(layout) -> RegistryConfig:
    return RegistryConfig(
        name="Demo",
        install_command="npm install demo-ui",
        description="Demo design system",
        use_cases=["Forms", "Layout"],
        components=layout,
    )


@pytest.fixture
def demo_service(demo_workspace, demo_config) -> RegistryService:
    return RegistryService([demo_config], workspace_root=demo_workspace)


@pytest.fixture
def demo_tools(demo_service) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register_services(RegistryTools(demo_service))
    return registry


# ========== Mock Tool Service ==========

class EmptyInput(BaseModel):
    pass


class UserIdInput(BaseModel):
    id: int = Field(description="User ID")


class CreateUserInput(BaseModel):
    name: str = Field(description="User name")
    email: str = Field(description="User email")


class SearchInput(BaseModel):
    query: str = Field(description="Search query")


class RenameUserInput(BaseModel):
    userId: int
    newName: str
    note: Optional[str] = None


class UserEmailInput(BaseModel):
    userId: int


INITIAL_USERS = [
    {"id": 1, "name": "Alice", "email": "alice@example.com"},
    {"id": 2, "name": "Bob", "email": "bob@example.com"},
    {"id": 3, "name": "Charlie", "email": "charlie@example.com"},
]


class MockToolService:
    """Service with a representative set of tool signatures."""

    def __init__(self):
        self.users: List[Dict] = [dict(u) for u in INITIAL_USERS]
        self.calls: List[tuple] = []

    @mcp_tool(
        name="list_mock_users",
        title="List Mock Users",
        description="Returns a list of all mock users",
        input_schema=EmptyInput,
    )
    def get_all_users(self) -> List[Dict]:
        self.calls.append(("get_all_users",))
        return self.users

    @mcp_tool(
        name="get_mock_user",
        title="Get Mock User",
        description="Get a specific mock user by ID",
        input_schema=UserIdInput,
    )
    def get_user_by_id(self, user_id: int) -> Optional[Dict]:
        self.calls.append(("get_user_by_id", user_id))
        return next((u for u in self.users if u["id"] == user_id), None)

    @mcp_tool(
        name="create_mock_user",
        description="Create a new mock user",
        input_schema=CreateUserInput,
    )
    def create_user(self, args: Dict) -> Dict:
        self.calls.append(("create_user", args))
        user = {"id": len(self.users) + 1, "name": args["name"], "email": args["email"]}
        self.users.append(user)
        return user

    @mcp_tool(
        name="search_mock_users",
        description="Search users by name (case-insensitive)",
        input_schema=SearchInput,
    )
    def search_users(self, query: str) -> List[Dict]:
        return [u for u in self.users if query.lower() in u["name"].lower()]

    @mcp_tool(
        name="rename_mock_user",
        input_schema=RenameUserInput,
        param_map={"userId": "user_id", "newName": "new_name"},
    )
    def rename_user(self, args: Dict) -> Dict:
        self.calls.append(("rename_user", args))
        user = self.get_user_by_id(args["user_id"])
        if user is None:
            raise ExecutionError(f"No user with id {args['user_id']}", tool_name="rename_mock_user")
        user["name"] = args["new_name"]
        return user

    @mcp_tool(
        name="get_mock_user_email",
        input_schema=UserEmailInput,
        param_map={"userId": "user_id"},
    )
    def get_user_email(self, user_id: int) -> str:
        self.calls.append(("get_user_email", user_id))
        return self.users[user_id - 1]["email"]

    @mcp_tool(name="get_mock_user_stats", input_schema=EmptyInput)
    def get_user_stats(self) -> Dict:
        return {
            "total": len(self.users),
            "domains": sorted({u["email"].split("@")[1] for u in self.users}),
        }

    @mcp_tool(name="mock_user_card", input_schema=UserIdInput)
    def user_card(self, user_id: int) -> Dict:
        user = self.get_user_by_id(user_id)
        return text_result(f"{user['name']} <{user['email']}>")

    @mcp_tool(name="explode", description="Always fails")
    def explode(self) -> None:
        raise RuntimeError("boom")

    @mcp_tool(name="async_count", input_schema=EmptyInput)
    async def async_count(self) -> int:
        await asyncio.sleep(0)
        return len(self.users)

    # Not decorated: must not become a tool
    def reset_users(self) -> None:
        self.users = [dict(u) for u in INITIAL_USERS]


@pytest.fixture
def mock_service() -> MockToolService:
    return MockToolService()


@pytest.fixture
def mock_tools(mock_service) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register_service(mock_service)
    return registry
