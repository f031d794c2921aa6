"""
Project type detection.

Classifies a directory into zero or more runtime environments.

Detection Strategy:
------------------
1. Manifest rules, in priority order: ``angular.json``, ``package.json``,
   ``composer.json``, ``go.mod``, ``Cargo.toml``, ``pom.xml``. Rules are
   additive, except that Angular suppresses the plain Node rule.
2. Heuristic rules for Go, Node and Python, run only when no environment of
   that family was produced above. They inspect the source files collected by
   a single recursive walk and generate a devpack for any external imports.
   ``requirements.txt`` shares the Python slot: when present it wins over the
   heuristic.
3. If nothing matched, a single ``generic`` environment is returned.

Required environment variables are scanned once over the same file list,
independent of which rules fired.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import CODE_EXTENSIONS, DETECTION_IGNORED_NAMES
from .deps import UNCONSTRAINED, DependencyResolver, Ecosystem
from .deps.resolver import resolve_node_version
from .envguard import scan_for_env_vars
from .metadata import GENERIC_TYPE, EnvironmentConfig, LifecycleCommands
from .scanner import is_ignored

logger = logging.getLogger(__name__)

DEFAULT_GO_VERSION = "1.21"
_GO_DIRECTIVE = re.compile(r"^go\s+([0-9]+\.[0-9]+)", re.MULTILINE)


@dataclass
class DetectionResult:
    """Result of project detection"""
    name: str
    environments: List[EnvironmentConfig] = field(default_factory=list)
    commands: LifecycleCommands = field(default_factory=LifecycleCommands)
    required_vars: List[str] = field(default_factory=list)
    code_files: List[Path] = field(default_factory=list)

    @property
    def types(self) -> List[str]:
        return [env.type for env in self.environments]


def find_code_files(root: Path) -> List[Path]:
    """Walk *root* once, returning source files the heuristics care about."""
    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_ignored(d, DETECTION_IGNORED_NAMES))
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1].lower() in CODE_EXTENSIONS:
                found.append(Path(dirpath) / filename)
    return found


def resolve_go_mod_version(root: Path) -> Optional[str]:
    """Return the ``go <major>.<minor>`` directive of ``go.mod``, if any."""
    try:
        content = (root / "go.mod").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    match = _GO_DIRECTIVE.search(content)
    return match.group(1) if match else None


class ProjectDetector:
    """
    Detects the runtimes a project needs.

    Usage:
        detector = ProjectDetector(Path("./my_project"))
        result = detector.detect()
        print(result.types)  # ['go', 'node']
    """

    def __init__(self, root: Path | str, resolver: Optional[DependencyResolver] = None):
        self.root = Path(root).resolve()
        self.resolver = resolver or DependencyResolver(self.root)

    def _exists(self, relative: str) -> bool:
        return (self.root / relative).exists()

    def detect(self) -> DetectionResult:
        code_files = find_code_files(self.root)
        result = DetectionResult(
            name=self.root.name,
            required_vars=scan_for_env_vars(code_files),
            code_files=code_files,
        )
        envs = result.environments

        # Manifest rules
        for rule in (
            self._detect_angular,
            self._detect_node,
            self._detect_php,
            self._detect_go,
            self._detect_rust,
            self._detect_java,
        ):
            env = rule(envs)
            if env is not None:
                envs.append(env)

        # Heuristic rules
        families = {env.family for env in envs}
        if "go" not in families:
            env = self._sherlock_go(code_files)
            if env is not None:
                envs.append(env)
        if "node" not in families and "angular" not in families:
            env = self._sherlock_node(code_files)
            if env is not None:
                envs.append(env)
        if "python" not in families:
            env = self._detect_python(code_files)
            if env is not None:
                envs.append(env)

        if not envs:
            envs.append(EnvironmentConfig(type=GENERIC_TYPE))

        logger.debug("Detected %s in %s", result.types, self.root)
        return result

    # --- Manifest rules ---

    def _detect_angular(self, envs) -> Optional[EnvironmentConfig]:
        if not self._exists("angular.json"):
            return None
        version = resolve_node_version(self.root, "@angular/core", self.resolver.query)
        return EnvironmentConfig(
            type="angular",
            version=version if version != UNCONSTRAINED else ">=14.0.0",
            setup=["npm install"],
            run="npm start",
        )

    def _detect_node(self, envs) -> Optional[EnvironmentConfig]:
        # Angular already implies an npm project; don't install twice.
        if any(env.type == "angular" for env in envs):
            return None
        if not self._exists("package.json"):
            return None
        env = EnvironmentConfig(type="node", version=">=18.0.0", setup=["npm install"], run="npm start")
        if self._exists("tsconfig.json"):
            env.type = "node (TypeScript)"
        return env

    def _detect_php(self, envs) -> Optional[EnvironmentConfig]:
        if not self._exists("composer.json"):
            return None
        run = "php -S localhost:8000"
        if self._exists("public/index.php"):
            run = "php -S localhost:8000 -t public"
        elif self._exists("artisan"):
            run = "php artisan serve"
        return EnvironmentConfig(type="php", version=">=8.0", setup=["composer install"], run=run)

    def _detect_go(self, envs) -> Optional[EnvironmentConfig]:
        if not self._exists("go.mod"):
            return None
        return EnvironmentConfig(
            type="go",
            version=resolve_go_mod_version(self.root) or DEFAULT_GO_VERSION,
            setup=["go mod download"],
            run="go run .",
        )

    def _detect_rust(self, envs) -> Optional[EnvironmentConfig]:
        if not self._exists("Cargo.toml"):
            return None
        return EnvironmentConfig(type="rust", version="1.70.0", setup=["cargo build"], run="cargo run")

    def _detect_java(self, envs) -> Optional[EnvironmentConfig]:
        if not self._exists("pom.xml"):
            return None
        if self._exists("src/main/resources/application.properties") or self._exists(
            "src/main/resources/application.yml"
        ):
            run = "mvn spring-boot:run"
        else:
            run = "java -jar target/app.jar"
        return EnvironmentConfig(type="java", version="17", setup=["mvn clean install"], run=run)

    # --- Heuristic rules ---

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def _sherlock_go(self, code_files: List[Path]) -> Optional[EnvironmentConfig]:
        if not any(path.suffix == ".go" for path in code_files):
            return None
        env = EnvironmentConfig(type="go", version=DEFAULT_GO_VERSION, run="go run .")
        devpack = self.resolver.generate_devpack(code_files, Ecosystem.GO)
        if devpack:
            env.setup = [f"#DEVPACK:{devpack}"]
        return env

    def _sherlock_node(self, code_files: List[Path]) -> Optional[EnvironmentConfig]:
        # Without external imports there is nothing to reproduce for Node.
        devpack = self.resolver.generate_devpack(code_files, Ecosystem.NODE)
        if not devpack:
            return None
        if self._exists("index.js"):
            run = "node index.js"
        else:
            node_files = [p for p in code_files if p.suffix.lower() in {".js", ".ts", ".jsx", ".tsx"}]
            run = f"node {self._relative(node_files[0])}"
        return EnvironmentConfig(type="node", version=">=18.0.0", setup=[f"#DEVPACK:{devpack}"], run=run)

    def _detect_python(self, code_files: List[Path]) -> Optional[EnvironmentConfig]:
        if self._exists("requirements.txt"):
            run = "python manage.py runserver" if self._exists("manage.py") else "python main.py"
            return EnvironmentConfig(
                type="python",
                version=">=3.9",
                setup=["pip install -r requirements.txt"],
                run=run,
            )

        py_files = [path for path in code_files if path.suffix == ".py"]
        if not py_files:
            return None

        env = EnvironmentConfig(type="python", version="3.10")
        devpack = self.resolver.generate_devpack(code_files, Ecosystem.PYTHON)
        if devpack:
            env.setup = [f"#DEVPACK:{devpack}"]

        if self._exists("main.py"):
            env.run = "python main.py"
        elif self._exists("app.py"):
            env.run = "python app.py"
        else:
            env.run = f"python {self._relative(py_files[0])}"
        return env


def detect_project(root: Path | str, resolver: Optional[DependencyResolver] = None) -> DetectionResult:
    """Convenience wrapper around ``ProjectDetector(root).detect()``."""
    return ProjectDetector(root, resolver=resolver).detect()


__all__ = [
    "DEFAULT_GO_VERSION",
    "DetectionResult",
    "ProjectDetector",
    "detect_project",
    "find_code_files",
    "resolve_go_mod_version",
]
