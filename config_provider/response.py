import logging
from typing import Iterable

import yaml

from config_provider.models import ConfigDocument, ConfigurationBundle, FileRecord

logger = logging.getLogger(__name__)


def pipeline_name(file_name: str) -> str:
    """Strip a trailing .yml, then a trailing .yaml; anything else is left alone."""
    name = file_name
    if name.endswith(".yml"):
        name = name[:-len(".yml")]
    if name.endswith(".yaml"):
        name = name[:-len(".yaml")]
    return name


def validate_yaml(name: str, content: str) -> bool:
    """Diagnostic only; the document is returned whatever this says."""
    try:
        for _ in yaml.safe_load_all(content):
            pass
    except yaml.YAMLError as e:
        logger.warning(f"    YAML validation failed for {name}: {e}")
        return False
    logger.debug(f"    YAML validation passed for {name}")
    return True


def build_response(file_records: Iterable[FileRecord]) -> ConfigurationBundle:
    configs = []
    for record in file_records:
        logger.debug(f"  - {record.name} ({len(record.content.encode('utf-8'))} bytes)")
        validate_yaml(record.name, record.content)
        configs.append(ConfigDocument(name=pipeline_name(record.name), content=record.content))
    return ConfigurationBundle(configs=configs)
