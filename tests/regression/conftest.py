"""
Regression test configuration.

Skips the GPU backend module when PyTorch or a GPU is unavailable.
"""

from pywls.core.compute.device import detect_gpu

collect_ignore_glob = []
if detect_gpu() is None:
    collect_ignore_glob.append("test_backend_gpu.py")
