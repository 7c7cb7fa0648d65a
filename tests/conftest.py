import os
import stat
import sys
from pathlib import Path
from textwrap import dedent

import pytest

from mavenit.config import HarnessConfig
from mavenit.execution.maven import executable_name
from mavenit.models import TestUnitIdentity

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake mvn is a POSIX shell script")

FAKE_MVN = """\
#!/bin/sh
# Stand-in for Maven: records its arguments into the project and exits with
# the code found in ./mvn-exit-code (default 0).
echo "fake maven $*"
echo "fake maven stderr" >&2
mkdir -p target
echo "$*" > target/arguments.txt
if [ -f mvn-exit-code ]; then
  exit "$(cat mvn-exit-code)"
fi
exit 0
"""

POM = dedent(
    """\
    <?xml version="1.0" encoding="UTF-8"?>
    <project xmlns="http://maven.apache.org/POM/4.0.0"
             xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
             xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 http://maven.apache.org/xsd/maven-4.0.0.xsd">
      <modelVersion>4.0.0</modelVersion>
      <parent>
        <groupId>com.example.parent</groupId>
        <artifactId>parent</artifactId>
        <version>1.2.3</version>
      </parent>
      <artifactId>demo</artifactId>
      <packaging>jar</packaging>
      <properties>
        <maven.compiler.release>17</maven.compiler.release>
      </properties>
      <build>
        <finalName>demo-final</finalName>
      </build>
    </project>
    """
)


@pytest.fixture
def fake_maven_home(tmp_path: Path) -> Path:
    """A Maven home whose bin/mvn is a tiny shell script."""
    home = tmp_path / "maven-home"
    mvn = home / "bin" / executable_name()
    mvn.parent.mkdir(parents=True)
    mvn.write_text(FAKE_MVN)
    mvn.chmod(mvn.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return home


@pytest.fixture
def maven_environ(fake_maven_home: Path) -> dict[str, str]:
    return {"PATH": os.environ.get("PATH", ""), "MAVEN_HOME": str(fake_maven_home)}


@pytest.fixture
def harness_config(tmp_path: Path) -> HarnessConfig:
    return HarnessConfig(target_dir=tmp_path / "target")


@pytest.fixture
def identity() -> TestUnitIdentity:
    return TestUnitIdentity(suite="com.example.it.BasicIT", case="the_first_case")


def write_fixture(fixtures_dir: Path, identity: TestUnitIdentity, exit_code: int | None = None) -> Path:
    """Creates a minimal fixture project for ``identity``."""
    fixture = fixtures_dir / identity.suite_path / identity.fixture_name
    (fixture / "src" / "main" / "resources").mkdir(parents=True)
    (fixture / "pom.xml").write_text(POM)
    (fixture / "src" / "main" / "resources" / "a.txt").write_text("a")
    if exit_code is not None:
        (fixture / "mvn-exit-code").write_text(str(exit_code))
    return fixture


def relative_paths(directory: Path) -> set[str]:
    return {p.relative_to(directory).as_posix() for p in directory.rglob("*")}
