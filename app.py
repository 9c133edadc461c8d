import streamlit as st

from core import state
from core.config import settings
from core.logging_setup import configure_logging
from core.version import __version__
from export.pdf_export import build_targeting_pdf, build_targeting_summary
from ui.targeting_panel import render_targeting_panel
from unitgrid.catalog import CatalogRegistry
from unitgrid.models import Bank, MortgageProgram
from unitgrid.presets import DEVELOPMENTS, PROGRAM_TYPES
from unitgrid.reporting import targeting_label

configure_logging(settings.log_level)
state.SESSION_FILE = settings.session_file


@st.cache_resource
def load_catalogs() -> CatalogRegistry:
    return CatalogRegistry.demo(
        count=settings.demo_development_count,
        section_heights=settings.demo_section_heights,
        units_per_floor=settings.demo_units_per_floor,
        seed=settings.demo_seed,
    )


def init_state():
    ss = st.session_state
    state.load_state()
    ss.setdefault(
        "banks",
        [
            Bank(
                id="1",
                name="Sberbank",
                programs=[
                    MortgageProgram(
                        id="p1",
                        name=PROGRAM_TYPES[0],
                        rate=6.0,
                        min_down_payment=20,
                        psk_min=6.1,
                        psk_max=7.5,
                        conditions="Program for families with children.",
                    )
                ],
            ).model_dump(),
            Bank(id="2", name="VTB", auto_rates=True).model_dump(),
        ],
    )
    ss.setdefault("ui_prefs", {})


def main():
    st.set_page_config(page_title="Mortgage program targeting", layout="wide")
    init_state()
    catalogs = load_catalogs()
    developments = {
        d: DEVELOPMENTS.get(d, d) for d in catalogs.development_ids()
    }

    st.sidebar.markdown(f"**Unit targeting v{__version__}**")
    banks = state.get_banks()
    bank_names = {b.id: b.name for b in banks}
    bank_id = st.sidebar.selectbox(
        "Bank", list(bank_names), format_func=lambda i: bank_names[i], key="active_bank_id"
    )
    bank = next(b for b in banks if b.id == bank_id)
    if not bank.programs:
        st.info("This bank has no mortgage programs.")
        return
    program_names = {p.id: f"{p.name} [{targeting_label(p.target_units)}]" for p in bank.programs}
    program_id = st.sidebar.selectbox(
        "Program", list(program_names), format_func=lambda i: program_names[i], key="active_program_id"
    )
    program = bank.program(program_id)

    updated = render_targeting_panel(catalogs, program, developments)
    if updated is not None:
        bank.programs = [updated if p.id == updated.id else p for p in bank.programs]
        state.put_bank(bank)
        program = updated
    state.save_state()

    st.divider()
    st.download_button(
        "Download targeting summary",
        data=build_targeting_summary(bank, program, catalogs),
        file_name=f"targeting_{program.id}.txt",
        mime="text/plain",
    )
    st.download_button(
        "Download targeting PDF",
        data=build_targeting_pdf(bank, program, catalogs),
        file_name=f"targeting_{program.id}.pdf",
        mime="application/pdf",
    )


if __name__ == "__main__":
    main()
