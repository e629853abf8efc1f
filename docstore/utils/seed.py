from __future__ import annotations

import copy

from ..services.library import LIBRARY_ROOT

_DEFAULT_LIBRARY = {
    LIBRARY_ROOT: {
        "borrow": {
            "borrow_bookbatch": [
                {
                    "batch_id": 10,
                    "batch_books": {
                        "books": [
                            {
                                "book_id": 1001,
                                "book_title": "Deep Work",
                                "book_authors": [
                                    {"Authors": [
                                        {"aut_id": 1, "aut_firstname": "Cal", "aut_lastname": "Newport"},
                                    ]},
                                ],
                            },
                            {
                                "book_id": 1002,
                                "book_title": "Digital Minimalism",
                                "book_authors": [
                                    {"Authors": [
                                        {"aut_id": 1, "aut_firstname": "Cal", "aut_lastname": "Newport"},
                                    ]},
                                ],
                            },
                            {
                                "book_id": 1003,
                                "book_title": "Made to Stick",
                                "book_authors": [
                                    {"Authors": [
                                        {"aut_id": 2, "aut_firstname": "Chip", "aut_lastname": "Heath"},
                                        {"aut_id": 3, "aut_firstname": "Dan", "aut_lastname": "Heath"},
                                    ]},
                                ],
                            },
                        ],
                    },
                    "batch_studentid": {
                        "Student": [
                            {"stud_id": 501, "stud_firstname": "Maya", "stud_lastname": "Lindqvist"},
                        ],
                    },
                },
            ],
        },
    },
}


def default_library() -> dict:
    """Fresh copy of the seed written when the library file does not exist."""
    return copy.deepcopy(_DEFAULT_LIBRARY)
