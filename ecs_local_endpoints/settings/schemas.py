"""Соответствие переменных окружения ключам настроек."""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

from ecs_local_endpoints.utils.helpers import parse_tags

EnvBinding = Tuple[str, str, Callable[[str], Any]]

# ENVIRONMENT_BINDINGS: переменная -> (группа, ключ, преобразование строки)
ENVIRONMENT_BINDINGS: Dict[str, EnvBinding] = {
    "ECS_LOCAL_METADATA_PORT": ("server", "port", int),
    "ECS_LOCAL_DOCKER_TIMEOUT": ("server", "docker_timeout_sec", int),
    "HOSTNAME": ("server", "own_container_id", str),
    "CLUSTER_ARN": ("task", "cluster", str),
    "TASK_ARN": ("task", "task_arn", str),
    "TASK_DEFINITION_FAMILY": ("task", "family", str),
    "TASK_DEFINITION_REVISION": ("task", "revision", str),
    "CONTAINER_INSTANCE_TAGS": ("task", "container_instance_tags", parse_tags),
    "TASK_TAGS": ("task", "task_tags", parse_tags),
    "ECS_LOCAL_TASK_METADATA": ("task", "task_metadata_path", str),
    "ECS_LOCAL_CONTAINER_METADATA": ("task", "container_metadata_path", str),
    "IAM_ENDPOINT": ("credentials", "iam_endpoint", str),
    "STS_ENDPOINT": ("credentials", "sts_endpoint", str),
    "SHARED_TOKEN_EXPIRATION": ("credentials", "shared_token_expiration", str),
    "ECS_LOCAL_LOG_LEVEL": ("logging", "level", str.upper),
    "ECS_LOCAL_LOG_DIR": ("logging", "log_dir", str),
}
