"""
Statement catalog: named, self-contained read statements.

Every statement takes no caller-supplied parameters and fixes its own
ordering. The mapping is read-only after import.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from core.errors import UnknownQuery

QUERIES: Mapping[str, str] = MappingProxyType(
    {
        "animals": "SELECT * FROM animal ORDER BY a_id",
        "species": "SELECT * FROM species ORDER BY s_id",
        "enclosures": "SELECT * FROM enclosure ORDER BY e_id",
        "food": "SELECT * FROM food ORDER BY f_id",
        "medrecs": "SELECT * FROM medrec ORDER BY mr_id",
        "feed_log": "SELECT * FROM feed_log ORDER BY fl_id DESC",
        "eats": "SELECT * FROM eats ORDER BY eats_id",
        "employee_enclosure": "SELECT * FROM employee_enclosure ORDER BY ee_id",
        "animal_enclosure": "SELECT * FROM animal_enclosure ORDER BY ae_id",
        "visitors": "SELECT * FROM visitor ORDER BY v_id",
        "tickets": "SELECT * FROM ticket ORDER BY t_id",
        "employees": "SELECT * FROM employee ORDER BY emp_id",
        "infra": "SELECT * FROM infra ORDER BY i_id",
        "events": "SELECT * FROM event ORDER BY ev_id",
        "event_infra": "SELECT ei_id, ev_id, i_id FROM event_infra ORDER BY ei_id",
        "vw_enclosure_status": "SELECT * FROM vw_enclosure_status",
        "notifications": "SELECT * FROM notifications ORDER BY created_at DESC",
        "inner_animal_species": """
            SELECT
              a.a_id,
              a.name AS animal_name,
              a.birth_date,
              a.gender,
              s.s_id AS species_id,
              s.common_name AS species_name,
              s.scientific_name,
              s.conservation_status
            FROM animal a
            INNER JOIN species s ON a.species_id = s.s_id
            ORDER BY a.a_id
        """,
        "inner_event_infra": """
            SELECT
              ev.ev_id,
              ev.title AS event_title,
              ev.e_date,
              ev.location AS event_location,
              ei.ei_id,
              i.i_id AS infra_id,
              i.name AS infra_name,
              ei.quantity
            FROM event ev
            INNER JOIN event_infra ei ON ev.ev_id = ei.ev_id
            INNER JOIN infra i ON ei.i_id = i.i_id
            ORDER BY ev.ev_id, i.i_id
        """,
        "left_enclosure_animals": """
            SELECT
              enc.e_id,
              enc.name AS enclosure_name,
              enc.capacity,
              ae.ae_id,
              a.a_id AS animal_id,
              a.name AS animal_name,
              ae.assigned_from,
              ae.assigned_to
            FROM enclosure enc
            LEFT JOIN animal_enclosure ae ON enc.e_id = ae.e_id
            LEFT JOIN animal a ON ae.a_id = a.a_id
            ORDER BY enc.e_id, ae.ae_id
        """,
        "right_animal_medrec": """
            SELECT
              a.a_id,
              a.name AS animal_name,
              mr.mr_id,
              mr.last_checked,
              mr.next_check,
              mr.diseases,
              mr.notes
            FROM medrec mr
            RIGHT JOIN animal a ON mr.a_id = a.a_id
            ORDER BY a.a_id, mr.mr_id
        """,
    }
)


def resolve(name: str | None, catalog: Mapping[str, str] = QUERIES) -> str:
    statement = catalog.get(name or "")
    if statement is None:
        raise UnknownQuery(name or "")
    return statement
