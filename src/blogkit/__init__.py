"""blogkit: validate, build, preview and lint a markdown blog.

Rendering is delegated to an external static-site generator and style
checking to a containerized markdown linter; blogkit owns the content
header schema and the invocations around those tools.
"""

__version__ = "0.1.0"
