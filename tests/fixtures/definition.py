DEFINITION = {
    "base": "https://reqres.in/api/",
    "endpoints": {
        "colors": {
            "colors": ["index", "store"],
            "colors/{colorId}": ["show", "update", "delete"],
        },
        "users": {
            "users": ["index", "store"],
            "users/{userId}": ["show", "update", "delete"],
        },
    },
    "query": {
        "users": {
            "name": ["index"],
            "job": ["index"],
        },
    },
    "global_query": {
        "page": ["index"],
        "per_page": ["index"],
        "delay": ["index", "show", "store", "update", "delete"],
    },
}
