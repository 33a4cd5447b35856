#!/usr/bin/env python3
"""
KUBEREPLACE RUNNER - File Orchestration
---------------------------------------
Drives the ReplacementEngine over manifest files on disk. All files of a run
are loaded into ONE document set, so a source resource may live in another
file than its targets. After the engine has run, each file's documents are
exported back and, unless in dry-run mode, written atomically.

Author: KubeReplace Team
Date: 2026-10-19
"""

import os
import shutil
import time
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Any, List, Iterable, Optional, Union

from kubereplace.core.engine import ReplacementEngine
from kubereplace.core.errors import ReplacementError
from kubereplace.core.models import Document
from kubereplace.manifest.exporter import KubeExporter
from kubereplace.manifest.loader import ManifestLoader

logger = logging.getLogger("kubereplace.runner")

BACKUP_SUFFIX = ".kubereplace.backup"
TEMP_SUFFIX = ".kubereplace.tmp"


@dataclass
class RunResult:
    reports: List[Dict[str, Any]] = field(default_factory=list)
    output: str = ""                       # Combined transformed stream of every file
    error: Optional[str] = None            # Set when the engine aborted the run

    @property
    def success(self) -> bool:
        return self.error is None


class ManifestRunner:
    """
    Loads, transforms and writes back manifest files. Maintains no state
    between runs apart from its collaborators.
    """

    def __init__(self, engine: ReplacementEngine):
        self.engine = engine
        self.loader = ManifestLoader()
        self.exporter = KubeExporter()

    def collect_files(self, paths: Iterable[Union[str, Path]], extension: str = ".yaml") -> List[Path]:
        """Expands directories recursively (skipping symlinks) into a sorted file list."""
        files = []
        patterns = {f"*{extension.lower()}", f"*{extension.upper()}"}
        for raw in paths:
            path = Path(raw).resolve()
            if path.is_file():
                files.append(path)
                continue
            if not path.exists():
                raise FileNotFoundError(f"Path missing: {path}")
            for p in patterns:
                files.extend(f for f in path.rglob(p) if f.is_file() and not f.is_symlink())
        # De-duplicate while keeping a stable order
        return sorted(set(files))

    def run(self, paths: Iterable[Union[str, Path]], extension: str = ".yaml",
            dry_run: bool = True, backup: bool = True) -> RunResult:
        """
        Performs a full replacement cycle across every manifest under `paths`.
        """
        files = self.collect_files(paths, extension)
        logger.info(f"Discovered {len(files)} manifest file(s)")

        originals: Dict[Path, str] = {}
        baselines: Dict[Path, str] = {}
        per_file: Dict[Path, List[Document]] = {}
        documents: List[Document] = []
        result = RunResult()

        try:
            # Phase 1: Read (BOM-aware) and parse every file
            for path in files:
                originals[path] = path.read_text(encoding='utf-8-sig')
                per_file[path] = self.loader.load(originals[path], source_path=str(path))
                # Formatting-only differences must not count as a change
                baselines[path] = self.exporter.export(per_file[path])
                documents.extend(per_file[path])

            # Phase 2: Replacement across the whole document set
            self.engine.transform(documents)
        except (ReplacementError, OSError) as e:
            logger.error(f"Replacement run aborted: {e}")
            result.error = str(e)
            result.reports = [self._file_error(str(path), str(e)) for path in files]
            return result

        # Phase 3: Export and (optionally) write back
        rendered = []
        for path in files:
            content = self.exporter.export(per_file[path])
            rendered.append(content)
            # Files without documents (comments only, bare separators) are never rewritten
            is_modified = bool(per_file[path]) and content != baselines[path]
            result.reports.append(
                self._write_file(path, originals[path], content, is_modified, dry_run, backup)
            )
        result.output = "---\n".join(c for c in rendered if c)
        return result

    def _write_file(self, path: Path, original: str, content: str, is_modified: bool,
                    dry_run: bool, backup: bool) -> Dict[str, Any]:
        report = {
            "file_path": str(path),
            "success": True,
            "status": self._derive_status(is_modified, dry_run),
            "modified": is_modified,
            "written": False,
            "backup_created": None,
            "content": content,
            "original": original,
            "timestamp": time.time(),
        }
        if dry_run or not is_modified:
            return report

        if backup:
            backup_path = self._create_unique_backup(path)
            try:
                shutil.copy2(path, backup_path)
                report["backup_created"] = str(backup_path)
            except OSError as e:
                report["backup_warning"] = f"Backup failed: {e}"

        try:
            self._atomic_write(path, content)
            report["written"] = True
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            report["write_error"] = str(e)
            report["success"] = False
            report["status"] = "FAILED"
        return report

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        total = len(reports)
        return {
            "total_files": total,
            "changed": sum(1 for r in reports if r.get("status") in ("PREVIEW", "REPLACED")),
            "written_to_disk": sum(1 for r in reports if r.get("written", False)),
            "backups_created": sum(1 for r in reports if r.get("backup_created") is not None),
            "errors": sum(1 for r in reports if not r.get("success", False)),
        }

    def _derive_status(self, modified: bool, dry: bool) -> str:
        if not modified: return "UNCHANGED"
        if dry: return "PREVIEW"
        return "REPLACED"

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_suffix(TEMP_SUFFIX)
        try:
            temp_file.write_text(content, encoding='utf-8')
            os.replace(temp_file, target_path)
        except OSError:
            if temp_file.exists():
                temp_file.unlink()
            raise

    def _create_unique_backup(self, target_path: Path) -> Path:
        backup_path = target_path.with_suffix(BACKUP_SUFFIX)
        counter = 1
        while backup_path.exists():
            backup_path = target_path.with_name(f"{target_path.stem}-{counter}{BACKUP_SUFFIX}")
            counter += 1
        return backup_path

    def _file_error(self, path: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": path, "status": "FAILED", "error": error,
            "success": False, "modified": False, "written": False, "backup_created": None,
        }
