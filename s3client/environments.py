"""Saved connection targets ("environments").

Each environment is one JSON file named after its key below
``~/.s3client/env/``.
"""
import enum
import json
import os
import re
import sys
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from .config import CONFIG_DIR
from .errors import Aborted, ArgumentError, EnvironmentConfigError, NotFound

ENV_DIR = os.path.join(CONFIG_DIR, "env")
ENV_KEY_PATTERN = re.compile(r'^[a-zA-Z0-9_\- ]+$')


class Origin(enum.Enum):
    INTERACTIVE = "interactive"
    FILE = "file"
    COMMAND_LINE = "command-line"


@dataclass(frozen=True)
class ConnectionTarget:
    key: str
    endpoint: str
    secure: bool
    access_key: str
    secret_key: str
    default_bucket: str = ''
    region: str = ''
    origin: Origin = Origin.FILE
    source_file: Optional[str] = None

    @property
    def endpoint_url(self) -> str:
        scheme = 'https' if self.secure else 'http'
        return f"{scheme}://{self.endpoint}"

    def to_record(self) -> dict:
        record = {
            "key": self.key,
            "endpoint": self.endpoint,
            "secure": self.secure,
            "accessKey": self.access_key,
            "secretKey": self.secret_key,
            "defaultBucket": self.default_bucket,
        }
        if self.region:
            record["region"] = self.region
        return record

    @classmethod
    def from_record(cls, record: dict, source_file: Optional[str] = None) -> "ConnectionTarget":
        try:
            return cls(
                key=record["key"],
                endpoint=record["endpoint"],
                secure=bool(record.get("secure", True)),
                access_key=record["accessKey"],
                secret_key=record["secretKey"],
                default_bucket=record.get("defaultBucket") or '',
                region=record.get("region") or '',
                origin=Origin.FILE,
                source_file=source_file,
            )
        except (KeyError, TypeError) as e:
            raise EnvironmentConfigError(f"malformed environment file {source_file}: missing {e}") from e


def split_url(url: str) -> Tuple[str, Optional[bool]]:
    """Strip an http(s) scheme; the flag is None when no scheme was given."""
    lowered = url.lower()
    if lowered.startswith("http://"):
        return url[7:], False
    if lowered.startswith("https://"):
        return url[8:], True
    return url, None


def check_env_key(key: str):
    if not ENV_KEY_PATTERN.match(key):
        raise ArgumentError("the environment key contains invalid characters")


def env_file_path(key: str, env_dir: Optional[str] = None) -> str:
    return os.path.join(env_dir or ENV_DIR, f"{key}.json")


def read_env(file_path: str) -> ConnectionTarget:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            record = json.load(f)
    except FileNotFoundError as e:
        raise NotFound(f"environment file {file_path} does not exist") from e
    except OSError as e:
        raise EnvironmentConfigError(f"unable to read environment file: {e}") from e
    except json.JSONDecodeError as e:
        raise EnvironmentConfigError(f"malformed environment file: {e}") from e
    if not isinstance(record, dict):
        raise EnvironmentConfigError(f"malformed environment file: {file_path}")
    return ConnectionTarget.from_record(record, source_file=file_path)


def write_env(target: ConnectionTarget, env_dir: Optional[str] = None) -> str:
    file_path = env_file_path(target.key, env_dir)
    os.makedirs(os.path.dirname(file_path), exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(target.to_record(), f, indent=2)
    return file_path


def get_environments(env_dir: Optional[str] = None) -> List[ConnectionTarget]:
    """All readable environments, sorted by key; broken files are reported and skipped."""
    env_dir = env_dir or ENV_DIR
    if not os.path.isdir(env_dir):
        return []
    environments = []
    for name in sorted(os.listdir(env_dir)):
        file_path = os.path.join(env_dir, name)
        if not name.endswith('.json') or not os.path.isfile(file_path):
            continue
        try:
            environments.append(read_env(file_path))
        except (EnvironmentConfigError, NotFound) as e:
            print(f"WARN: failed to load environment {name!r}: {e}", file=sys.stderr)
    return environments


def read_non_empty(read_line: Callable[[str], str], prompt: str) -> str:
    value = read_line(prompt).strip()
    if not value:
        raise Aborted()
    return value


def enter_target(key: str, read_line: Callable[[str], str], read_secret: Optional[Callable[[str], str]] = None) -> ConnectionTarget:
    """Ask the user for endpoint and credentials of a new environment."""
    read_secret = read_secret or read_line
    endpoint, secure = split_url(read_non_empty(read_line, "URL> "))
    if secure is None:
        answer = read_non_empty(read_line, "Secure (yes/no)?> ")
        secure = answer[0] in ('y', 'Y')
    access_key = read_non_empty(read_line, "Access Key> ")
    secret_key = read_non_empty(read_secret, "Secret Key> ")
    return ConnectionTarget(
        key=key,
        endpoint=endpoint,
        secure=secure,
        access_key=access_key,
        secret_key=secret_key,
        origin=Origin.INTERACTIVE,
    )


def load_or_create_env(key: str, read_line, read_secret=None, env_dir: Optional[str] = None) -> ConnectionTarget:
    check_env_key(key)
    file_path = env_file_path(key, env_dir)
    if os.path.exists(file_path):
        return read_env(file_path)

    print(f"The environment {key!r} does not exist and will be created:")
    target = enter_target(key, read_line, read_secret)
    file_path = write_env(target, env_dir)
    return replace(target, source_file=file_path)


def select_env(read_line, env_dir: Optional[str] = None) -> ConnectionTarget:
    environments = get_environments(env_dir)
    if not environments:
        raise NotFound('no environments saved yet. Please use "-e {name}" to create a new environment and use it')
    if len(environments) == 1:
        return environments[0]

    width = max(len(e.key) for e in environments)
    print("Select environment:")
    for i, env in enumerate(environments, start=1):
        print(f"  {i:>2})  {env.key.ljust(width)}  ->  {env.endpoint}")
    answer = read_non_empty(read_line, "Environment> ")
    for env in environments:
        if env.key == answer:
            return env
    try:
        index = int(answer)
    except ValueError:
        raise ArgumentError(f"unknown environment {answer!r}") from None
    if not 1 <= index <= len(environments):
        raise ArgumentError(f"invalid selection {answer!r}")
    return environments[index - 1]
