"""
========================
Testing statclust packaging
========================
"""
import subprocess

import statclust


def test_statclust_version(package_directory):
    """PEP 396 version available equals version from VERSION.txt"""
    file_version = (package_directory / 'VERSION.txt').read_text()
    assert statclust.__version__ == file_version.strip()


def test_statclust_help_command():
    """Check a "statclust" command is available"""
    result = subprocess.run(['statclust', '--help'], stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    # Command available in $PATH
    assert result.returncode == 0

    # Command help displayed
    assert result.stdout.startswith(b'Usage: statclust')
