CATEGORY_STATUSES = ("active", "inactive")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

DEFAULT_SEARCH_DEBOUNCE_MS = 300

DELETE_REASON_HAS_PRODUCTS = "Cannot delete category that contains products"
DELETE_REASON_HAS_SUBCATEGORIES = "Cannot delete category that has subcategories"
