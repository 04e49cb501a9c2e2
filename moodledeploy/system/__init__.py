"""Host package and service control."""

from .packages import PackageManager, ServiceManager, required_packages

__all__ = ["PackageManager", "ServiceManager", "required_packages"]
