import sys
from pathlib import Path
from typing import List


def get_tcp_relay_script_path() -> Path:
    script_path = Path(__file__).resolve().parents[1] / "scripts" / "tcp_relay.py"
    if not script_path.exists():
        raise FileNotFoundError("Missing tests/scripts/tcp_relay.py")
    return script_path


def tcp_relay_command(*args: str) -> List[str]:
    return [sys.executable, str(get_tcp_relay_script_path()), *args]
