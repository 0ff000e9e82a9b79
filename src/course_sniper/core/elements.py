"""Selectors and form identifiers for the PeopleSoft shopping-cart pages."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PORTAL_URL = (
    "https://saprod.emory.edu/psc/saprod_48/EMPLOYEE/SA/c/"
    "SSR_STUDENT_FL.SSR_SHOP_CART_FL.GBL"
)


@dataclass(frozen=True)
class PageElements:
    """Every DOM fragment and form field the workflow depends on.

    Row-level selectors (``availability``, ``description`` ...) are resolved
    relative to a ``course_row`` or ``results_rows`` element.
    """

    page_url: str = DEFAULT_PORTAL_URL

    # login
    username_input: str = "input#userid"
    passwd_input: str = "input#pwd"
    login_error: str = "div#ptloginerrorcont"

    # duo
    duo_waiting: str = "div#auth-view-wrapper:not(.auth-error)"
    duo_trust_browser: str = 'button[id="trust-browser-button"]'
    duo_time_out_try_again: str = "button.try-again-button"
    duo_verification_code: str = "div.verification-code"

    # cart
    semester_cart: str = 'a[id^="SSR_CART_TRM_FL_TERM_DESCR30$"]'
    course_row: str = 'tr[id^="SSR_REGFORM_VW$0_row_"]'
    checkboxes: str = 'input[type="checkbox"][id^="DERIVED_REGFRM1_SSR_SELECT$"]'
    availability: str = 'span[id^="DERIVED_SSR_FL_SSR_AVAIL_FL$"]'
    description: str = 'span[id^="DERIVED_SSR_FL_SSR_DESCR80$"]'
    schedule: str = 'span[id^="DERIVED_REGFRM1_SSR_MTG_SCHED_LONG$"]'
    room: str = 'span[id^="DERIVED_REGFRM1_SSR_MTG_LOC_LONG$"]'
    instructor: str = 'span[id^="DERIVED_REGFRM1_SSR_INSTR_LONG$"]'
    credits: str = 'span[id^="DERIVED_SSR_FL_SSR_UNITS_LBL$"]'
    seats: str = 'span[id^="DERIVED_SSR_FL_SSR_DESCR50$"]'

    # actions
    validate_button: str = "a#DERIVED_SSR_FL_SSR_VALIDATE_FL"
    enroll_button: str = "a#DERIVED_SSR_FL_SSR_ENROLL_FL"
    enroll_confirm_button: str = 'a[id="#ICYes"]'

    # results
    results_rows: str = 'div[id^="win48div$ICField229_row$"]'
    result_description: str = 'span[id^="DERIVED_REGFRM1_DESCRLONG$"]'
    result_status: str = 'div[id^="win48divDERIVED_REGFRM1_SSR_STATUS_LONG$"]'
    registration_success: str = "/cs/saprod/cache/PS_CS_STATUS_SUCCESS_ICN_1.gif"
    registration_fail: str = "/cs/saprod/cache/PS_CS_STATUS_ERROR_ICN_1.gif"

    # direct form submission
    form: str = 'form[name^="win"]'
    select_field_prefix: str = "DERIVED_REGFRM1_SSR_SELECT$"
    select_value: str = "Y"
    action_field: str = "ICAction"
    state_field: str = "ICStateNum"
    enroll_action: str = "DERIVED_SSR_FL_SSR_ENROLL_FL"
    confirm_action: str = "#ICYes"

    def select_field(self, checkbox_index: int) -> str:
        return f"{self.select_field_prefix}{checkbox_index}"
