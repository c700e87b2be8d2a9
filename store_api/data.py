# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Static store fixtures."""

from typing import Dict, List

PRODUCTS: List[Dict] = [
    {"id": 1, "name": "Mug", "price": 1099},
    {"id": 2, "name": "Bowl", "price": 1599},
    {"id": 3, "name": "Plate", "price": 1299},
    {"id": 4, "name": "Fork", "price": 599},
    {"id": 5, "name": "Spoon", "price": 799},
    {"id": 6, "name": "Knife", "price": 1099},
    {"id": 7, "name": "Cup", "price": 899},
    {"id": 8, "name": "Saucer", "price": 699},
    {"id": 9, "name": "Dish", "price": 1499},
    {"id": 10, "name": "Glass", "price": 1199},
]

EMPLOYEES: List[Dict] = [
    {"id": 1, "name": "Jeff", "position": "Manager"},
    {"id": 2, "name": "Benny", "position": "Sales Associate"},
    {"id": 3, "name": "Lisa", "position": "Assistant Manager"},
    {"id": 4, "name": "Craig", "position": "Sales Associate"},
    {"id": 5, "name": "Greg", "position": "Sales Associate"},
    {"id": 6, "name": "Sheila", "position": "Product Tester"},
    {"id": 7, "name": "Steven", "position": "Clerk"},
    {"id": 8, "name": "Kelly", "position": "Clerk"},
    {"id": 9, "name": "Dina", "position": "Cashier"},
    {"id": 10, "name": "Kevin", "position": "Cashier"},
]
