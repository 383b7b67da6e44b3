import json
from pathlib import Path

import pytest

from robin.knowledge import KnowledgeStore
from robin.tools import ToolRegistry
from robin.tools.knowledge_tools import register_knowledge_tools


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture()
def store(data_dir: Path) -> KnowledgeStore:
    return KnowledgeStore(data_dir)


@pytest.fixture()
def registry(store: KnowledgeStore) -> ToolRegistry:
    registry = ToolRegistry()
    register_knowledge_tools(registry, store)
    return registry


@pytest.fixture()
def jane_record(data_dir: Path) -> dict:
    record = {
        "assistant_name": "Robin",
        "links": "https://example.com/jane",
        "additional_info": "Owns the billing service and the deploy pipeline.",
        "display_name": "Jane",
    }
    (data_dir / "jane_doe_example_com.json").write_text(json.dumps(record))
    return record
