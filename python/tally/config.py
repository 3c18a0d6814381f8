from __future__ import annotations

import dataclasses
import secrets
import socket

from dataclasses import dataclass
from typing import Optional

def _get_open_port(host: str = 'localhost') -> int:
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind((host, 0))
    port = s.getsockname()[1]
    s.close()
    return port

@dataclass(frozen=True)
class ServeConfig:
    '''Where and how the run loop serves the page.

    ``port=None`` picks a free port and ``token=None`` generates a fresh auth token;
    :meth:`resolved` fills both in.
    '''
    host: str = 'localhost'
    port: Optional[int] = None
    token: Optional[str] = None
    open_browser: bool = True

    def resolved(self) -> ServeConfig:
        return dataclasses.replace(
            self,
            port=self.port if self.port is not None else _get_open_port(self.host),
            token=self.token if self.token is not None else secrets.token_urlsafe(32),
        )

    @property
    def auth_url(self) -> str:
        if self.port is None or self.token is None:
            raise ValueError('auth_url needs a resolved config')
        return f'http://{self.host}:{self.port}/auth/{self.token}'
