"""depsight - dependency inventory for JavaScript projects.

Reports which declared dependencies are used in source and which have
newer releases on the registry.
"""

__version__ = "0.1.0"
