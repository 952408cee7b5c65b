"""Dependency scanners for manifests and installed packages."""

from src.layers.dependency_scanner.base_scanner import (
    BaseDependencyScanner,
    CompositeScanner,
    ScanResult,
)
from src.layers.dependency_scanner.file_system_scanner import FileSystemScanner
from src.layers.dependency_scanner.go_scanner import GoScanner
from src.layers.dependency_scanner.npm_scanner import NpmScanner
from src.layers.dependency_scanner.package_manager import PackageManagerExtractor
from src.layers.dependency_scanner.python_scanner import PythonScanner

__all__ = [
    "BaseDependencyScanner",
    "CompositeScanner",
    "FileSystemScanner",
    "GoScanner",
    "NpmScanner",
    "PackageManagerExtractor",
    "PythonScanner",
    "ScanResult",
]
