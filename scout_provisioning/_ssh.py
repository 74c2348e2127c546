# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import shlex
import subprocess


def ssh_still(host: str, command: str, stdin: bytes = b''):
    """Run command, return the result whatever the exit code is.

    Only a connection failure raises.
    """
    r = subprocess.run(
        _build(host, command),
        input=stdin,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        timeout=600,
        )
    if r.returncode == 255:
        raise SSHCannotConnect(r.stderr.decode(errors='replace'))
    return r


def _build(host, command):
    # In BatchMode, execution fails if interactive input is required.
    full_command = ['ssh', '-oBatchMode=yes', host, command]
    _logger.info("Run: %s", shlex.join(full_command))
    return full_command


class SSHCannotConnect(Exception):
    pass


_logger = logging.getLogger(__name__)
