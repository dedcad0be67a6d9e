#
# Copyright 2024 zhlinh and flavorgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Architecture split selection from the invoked task names.

A single task such as "assembleFdroidArm64Release" narrows the ABI split
to one architecture. Several tasks never narrow, since there is no way to
tell which task's architecture should win.
"""

from typing import Optional, Sequence, Tuple

# Checked in order: the more specific marker must come first ("arm64"
# before "arm", "x64" before "x86").
ABI_RULES = (
    ("arm64", "arm64-v8a"),
    ("arm", "armeabi-v7a"),
    ("x64", "x86_64"),
    ("x86", "x86"),
)


def select_target_abi(task_names: Sequence[str]) -> Optional[str]:
    """
    Pick the single architecture named by the invocation, if any.

    Args:
        task_names: Task names passed to the build, in order

    Returns:
        The ABI to build exclusively, or None to build every ABI
    """
    if len(task_names) != 1:
        return None
    target_task = task_names[0].lower()
    for marker, abi in ABI_RULES:
        if marker in target_task:
            return abi
    return None


def enabled_architectures(declared: Sequence[str], target_abi: Optional[str]) -> Tuple[str, ...]:
    if target_abi is None:
        return tuple(declared)
    return tuple(abi for abi in declared if abi == target_abi)
