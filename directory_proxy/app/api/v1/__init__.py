"""
Version 1 of the directory API.

These are the routes storefront themes already call
(``/directory``, ``/category-groups`` and so on); breaking changes
belong in a new version subpackage.
"""
