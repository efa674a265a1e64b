from __future__ import annotations

from .documents import ChecklistDocument, ChecklistRecord

# Refrigeration units that must be logged on every health checklist.
TEMPERATURE_LOG_KEYS = [
    "Kitchen_Meat_Cooler",
    "Kitchen_Fry_Freezer",
    "Kitchen_Waffle_Cooler",
    "Kitchen_Sandwich_Cooler",
    "Back_Meat_Cooler",
    "Back_Fry_Freezer",
    "Back_Produce_Cooler",
    "Front_Silver_Cooler",
    "Front_Drink_Cooler",
    "Front_Cheesecake_Freezer",
    "Front_Counter_Drink_Cooler",
]

TEMPERATURE_LOG_NAMES = {
    "Kitchen_Meat_Cooler": "Kitchen Meat Cooler",
    "Kitchen_Fry_Freezer": "Kitchen Fry Freezer",
    "Kitchen_Waffle_Cooler": "Kitchen Waffle Cooler",
    "Kitchen_Sandwich_Cooler": "Kitchen Sandwich Cooler",
    "Back_Meat_Cooler": "Back Storage Meat Cooler",
    "Back_Fry_Freezer": "Back Storage Fry Freezer",
    "Back_Produce_Cooler": "Back Storage Produce Cooler",
    "Front_Silver_Cooler": "Front Storage Silver Cooler",
    "Front_Drink_Cooler": "Front Storage Drink Cooler",
    "Front_Cheesecake_Freezer": "Front Storage Cheesecake Freezer",
    "Front_Counter_Drink_Cooler": "Front Counter Drink Cooler",
}

COOLER_STANDARD = "41°F or below"
FREEZER_STANDARD = "0°F or below"

TEMPERATURE_LOG_STANDARDS = {
    key: FREEZER_STANDARD if key.endswith("Freezer") else COOLER_STANDARD for key in TEMPERATURE_LOG_KEYS
}

TEMP_LOG_TASK_PREFIX = "[Temp Log]"
TEMP_LOG_CHECKLIST_IDS = frozenset({"health"})
STRUCTURAL_CHECKLIST_IDS = frozenset({"health", "boh_supervisor_audit"})

LOCATIONS = ["Austell", "Smyrna"]

BOH_STATIONS: list[tuple[str, str, str, list[str]]] = [
    (
        "fryer_station",
        "Fryer",
        "1. Fryer Station (3 Fryers & Cold Prep)",
        [
            "Drain, filter oil, and clean all 3 fryer pots/baskets.",
            "Clean and sanitize the adjacent prep table surface.",
            "Check meat cooler temperature (under 41°F).",
            "Ensure French fry freezer door is sealed and floor clear.",
            "Sweep/mop floor and clean surrounding walls around fryers and prep.",
        ],
    ),
    (
        "flattop_burner",
        "Flattop",
        "2. Flattop & 6-Eye Burner Station",
        [
            "Scrape, scrub clean, and lightly oil the flattop.",
            "Remove grates from 6-eye burner, clean drip trays, and wipe exterior.",
            "Clean and sanitize the adjacent table and hot warmer well exterior.",
            "Verify hot warmer well water is clean and temperature is set (over 135°F).",
            "Clean surrounding walls and sweep/mop floor area.",
        ],
    ),
    (
        "waffle_station",
        "Waffle",
        "3. Waffle Maker Station",
        [
            "Scrape off and wipe down 2 waffle makers (plates and exterior).",
            "Clean and sanitize the waffle batter prep surface.",
            "Check waffle maker cooler temperature (under 41°F).",
            "Restock waffle mix/ingredients as needed.",
            "Clean surrounding walls and sweep/mop floor area.",
        ],
    ),
    (
        "expo_station_prep",
        "Expo",
        "4. Expo & Sandwich Prep Station",
        [
            "Clean and sanitize expo prep table surface.",
            "Wipe down POS/printer/monitor at expo station.",
            "Clean and organize double door sandwich cooler (exterior/interior).",
            "Check sandwich cooler temperature (under 41°F).",
            "Restock all side containers and condiments.",
            "Clean surrounding walls and sweep/mop floor area.",
        ],
    ),
    (
        "dish_station",
        "Dish",
        "5. Dish & Prep Sink Station",
        [
            "Clean out the interior of the 3-compartment sink.",
            "Test and log sanitizer concentration in 3-comp sink.",
            "Clean and sanitize the dish rack area and wipe down dish machine exterior.",
            "Clean and sanitize the prep sink and two adjacent prep tables.",
            "Clean surrounding walls and sweep/squeegee water from floor near sinks.",
        ],
    ),
]

DISPLAY_ORDER_IDS = [
    "health",
    "foh",
    "restroom",
    "fryer_station",
    "flattop_burner",
    "waffle_station",
    "expo_station_prep",
    "dish_station",
    "boh_supervisor_audit",
]


def temp_log_task(key: str) -> str:
    return (
        f"{TEMP_LOG_TASK_PREFIX} Record temperature for {TEMPERATURE_LOG_NAMES[key]} "
        f"(Standard: {TEMPERATURE_LOG_STANDARDS[key]})."
    )


def initial_checklists() -> list[ChecklistRecord]:
    lists = [
        ChecklistRecord(
            id="health",
            name="Health Compliance",
            tasks=[
                "Verify all raw foods are stored below ready-to-eat foods.",
                "Test and log 3-compartment sink sanitizer concentration (e.g., 50-100 PPM).",
                "Ensure handwashing sinks are fully stocked and accessible.",
                "Confirm no bare-hand contact with ready-to-eat food (gloves/utensils used).",
                "Check and log internal cooking temperatures (Pork/Fish 145°F, Poultry 165°F).",
                *[temp_log_task(key) for key in TEMPERATURE_LOG_KEYS],
            ],
        ),
        ChecklistRecord(
            id="foh",
            name="FOH Opening Checklist",
            tasks=[
                "Turn on lights, set music/ambiance.",
                "Wipe down all tables, chairs, and booths.",
                "Spot clean all windows and glass doors (remove smudges).",
                "Fold and stock all napkins/silverware roll-ups.",
                "Stock server station and fill ice bins.",
                "Wipe down and sanitize all menus.",
                "Check FOH trash receptacles (empty and wipe exteriors).",
            ],
        ),
        ChecklistRecord(
            id="restroom",
            name="Restroom Cleanliness",
            tasks=[
                "Clean and sanitize toilet bowls and seats.",
                "Wipe down sinks, counters, and mirrors.",
                "Restock toilet paper and paper towels.",
                "Refill soap dispensers.",
                "Empty trash receptacle and replace liner.",
                "Spot mop floor and address any odors.",
            ],
        ),
    ]
    lists.extend(ChecklistRecord(id=sid, name=name, tasks=list(tasks)) for sid, _, name, tasks in BOH_STATIONS)
    # Supervisor audit covers every station's cleaning tasks, no temperature logs.
    lists.append(
        ChecklistRecord(
            id="boh_supervisor_audit",
            name="6. BOH Supervisor Audit (All Stations)",
            tasks=[f"[{label}] {task}" for _, label, _, tasks in BOH_STATIONS for task in tasks],
        )
    )
    return lists


def initial_document() -> ChecklistDocument:
    return ChecklistDocument(checklists=initial_checklists(), submissions=[], reports=[])
