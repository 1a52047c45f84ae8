"""
CMake builder implementation
"""

import shutil
from typing import List

from .base_builder import BaseBuilder, InstallStep


class CMakeBuilder(BaseBuilder):
    """Builder for the CMake-based Sunshine tree"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.cmake = shutil.which("cmake") or "cmake"
        self.make = shutil.which("make") or "make"

    def configure(self) -> InstallStep:
        """Configure using CMake"""
        cmd = [self.cmake, "-S", str(self.source_dir), "-B", str(self.build_dir)]
        cmd.extend(self.plan.cmake_args())
        cmd.append("-Wno-dev")
        return InstallStep(name="configure", command=tuple(cmd), cwd=self.source_dir)

    def build(self) -> InstallStep:
        """Build using make in the build directory"""
        cmd = [self.make, *self.variant.make_args]
        return InstallStep(name="compile", command=tuple(cmd), cwd=self.build_dir)

    def install(self) -> List[InstallStep]:
        """Install using make, then copy the extra binaries"""
        steps = [InstallStep(
            name="install",
            command=(self.make, "install"),
            cwd=self.build_dir,
            artifact=self.install_dir / self.variant.binary,
        )]
        steps.extend(self.install_binaries())
        return steps
