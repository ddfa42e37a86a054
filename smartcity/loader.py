"""
YAML engine configuration loader with schema validation.

Loads EngineConfig from a YAML file and validates it against the JSON
schema shipped in smartcity/schemas/.
"""

import yaml
import json
from pathlib import Path
from typing import Optional
import jsonschema

from .data_types import EngineConfig

PACKAGE_ROOT = Path(__file__).parent
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "data" / "engine.yaml"
DEFAULT_SCHEMA_DIR = PACKAGE_ROOT / "schemas"


class ConfigError(Exception):
    """Raised when configuration loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise ConfigError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error in {file_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at top level of {file_path}")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        raise ConfigError(f"Schema not found: {schema_path}")

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON schema {schema_path}: {e}")


def config_from_dict(data: dict) -> EngineConfig:
    """Build EngineConfig from an already validated mapping"""
    engine = data.get('engine') or {}
    return EngineConfig(
        seed=engine.get('seed'),
        qubit_count=engine.get('qubit_count', 5),
        initial_speed=engine.get('initial_speed', 1.0),
        history_cap=engine.get('history_cap', 20),
        ledger_edge_cap=engine.get('ledger_edge_cap', 20),
        transaction_cap=engine.get('transaction_cap', 20),
        description=data.get('description'),
    )


def load_engine_config(
    file_path: Optional[Path] = None,
    schema_dir: Optional[Path] = DEFAULT_SCHEMA_DIR
) -> EngineConfig:
    """
    Load engine configuration from YAML.

    Args:
        file_path: Config file (packaged default if None)
        schema_dir: Directory holding engine.schema.json (None skips validation)

    Returns:
        EngineConfig
    """
    file_path = Path(file_path) if file_path is not None else DEFAULT_CONFIG_PATH
    data = load_yaml(file_path)

    if schema_dir:
        schema_path = Path(schema_dir) / "engine.schema.json"
        validate_against_schema(data, schema_path, file_path)

    return config_from_dict(data)
