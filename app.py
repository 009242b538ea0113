from __future__ import annotations

import logging

import numpy as np
import streamlit as st
from matplotlib import pyplot as plt

from raytracing import (
    BeamFan,
    PlotConfig,
    PlotMode,
    SSVMode,
    SwathSoundings,
    VelocityModel,
    create_profile,
    setup_logging,
    trace_swath,
)
from raytracing.config import (
    DEFAULT_BEAMS,
    DEFAULT_PLOT_CAPACITY,
    DEFAULT_PROFILE_KIND,
    DEFAULT_SOURCE_DEPTH,
    DEFAULT_SWATH_ANGLE,
    DEFAULT_TWO_WAY_TIME,
)


st.set_page_config(page_title="Трассировка лучей в профиле скорости звука", layout="wide")
st.title("Трассировка акустических лучей: от угла и времени к глубине")
st.markdown(
    """
    Многолучевой эхолот измеряет для каждого луча угол выхода и время
    распространения. Чтобы получить глубину, луч нужно провести через
    **профиль скорости звука**: в каждом слое с постоянным градиентом луч
    движется по дуге окружности, в однородном слое — по прямой.
    """
)

sidebar = st.sidebar
sidebar.header("Профиль скорости звука")
kind_labels = {
    "thermocline": "Термоклин",
    "gradient": "Линейный градиент",
    "munk": "Звуковой канал Мунка",
    "isovelocity": "Постоянная скорость",
}
selected_label = sidebar.selectbox(
    "Выбор профиля",
    options=list(kind_labels.values()),
    index=list(kind_labels).index(DEFAULT_PROFILE_KIND),
)
inverse_kind = {v: k for k, v in kind_labels.items()}
profile = create_profile(inverse_kind[selected_label])
model = profile.model

sidebar.header("Веер лучей")
source_depth = sidebar.slider(
    "Глубина антенны (м)", -10.0, min(200.0, model.bottom), DEFAULT_SOURCE_DEPTH, step=1.0,
    help="Если антенна выше начала профиля, луч трассируется от верха профиля "
         "со статической поправкой глубины.",
)
n_beams = sidebar.slider("Число лучей", 1, 101, DEFAULT_BEAMS, step=2)
swath_angle = sidebar.slider("Ширина полосы (°)", 0.0, 170.0, DEFAULT_SWATH_ANGLE, step=5.0)
two_way_time = sidebar.number_input(
    "Двойное время пробега (с)", value=DEFAULT_TWO_WAY_TIME, min_value=0.01, step=0.1
)

sidebar.header("Поправка за скорость у антенны")
ssv_labels = {
    "Без поправки": SSVMode.NONE,
    "Скорость у антенны верна": SSVMode.CORRECT,
    "Скорость у антенны неверна": SSVMode.INCORRECT,
}
ssv_label = sidebar.selectbox("Режим", options=list(ssv_labels))
surface_vel = sidebar.number_input(
    "Скорость, использованная эхолотом (м/с)",
    value=float(model.velocity_at(max(source_depth, model.top))),
    min_value=0.0,
)
null_angle = sidebar.slider("Нулевой угол антенны (°)", -30.0, 30.0, 0.0, step=1.0)

with sidebar.expander("Отладка"):
    plot_capacity = st.slider("Точек на луч", 10, 2000, DEFAULT_PLOT_CAPACITY, step=10)
    dense = st.checkbox("Дуги по сегментам", value=True,
        help="Если выключено, сохраняется одна точка на каждый пройденный слой.")
    if st.checkbox("Подробный журнал трассировки", value=False):
        setup_logging(logging.DEBUG)

plot_config = PlotConfig(PlotMode.DENSE if dense else PlotMode.TABLE, plot_capacity)
null_angles = np.full(n_beams, null_angle) if ssv_labels[ssv_label] is SSVMode.INCORRECT else None
fan = BeamFan.equiangular(n_beams, swath_angle, two_way_time, null_angles=null_angles)
soundings = trace_swath(
    model,
    source_depth,
    fan,
    ssv_mode=ssv_labels[ssv_label],
    surface_vel=surface_vel,
    plot=plot_config,
)


def _plot_profile(model: VelocityModel) -> plt.Figure:
    fig, ax = plt.subplots(figsize=(3.5, 5))
    z, v = model.depth_profile()
    ax.plot(v, z, color="tab:blue")
    ax.plot(model.velocity, model.depth, "o", color="tab:blue", ms=3)
    ax.set_title("Профиль скорости")
    ax.set_xlabel("v, м/с")
    ax.set_ylabel("z, м")
    ax.invert_yaxis()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def _plot_fan(soundings: SwathSoundings, model: VelocityModel) -> plt.Figure:
    fig, ax = plt.subplots(figsize=(7, 5))
    for path in soundings.paths:
        if path is None:
            continue
        ax.plot(path.x, path.z, color="tab:gray", lw=0.8)
    ax.plot(soundings.acrosstrack, soundings.depth, "o-", color="tab:red", ms=3,
            label="Конечные точки лучей")
    ax.axhline(model.bottom, color="black", linestyle=":", label="Низ профиля")
    ax.set_title("Веер лучей")
    ax.set_xlabel("Поперечное расстояние, м")
    ax.set_ylabel("Глубина, м")
    ax.invert_yaxis()
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    return fig


tab_fan, tab_table, tab_guide = st.tabs(["Веер лучей", "Таблица глубин", "Гайд"])

with tab_fan:
    col_profile, col_fan = st.columns([1, 2])
    with col_profile:
        st.pyplot(_plot_profile(model))
        meta = profile.metadata or {}
        st.caption(str(meta.get("description", "")))
    with col_fan:
        st.pyplot(_plot_fan(soundings, model))
    if soundings.static_shift != 0.0:
        st.info(
            f"Антенна выше начала профиля: применена статическая поправка "
            f"{soundings.static_shift:+.1f} м."
        )
    out_of_bounds = sum(1 for s in soundings.status if s is not None and s.out_of_bounds)
    if out_of_bounds:
        st.warning(f"{out_of_bounds} лучей вышли за пределы профиля до конца времени пробега.")

with tab_table:
    st.dataframe(
        {
            "угол, °": fan.angles,
            "поперечное, м": soundings.acrosstrack,
            "глубина, м": soundings.depth,
            "время, с": soundings.travel_time,
            "статус": [s.name if s is not None else "—" for s in soundings.status],
        },
        use_container_width=True,
    )

with tab_guide:
    st.markdown(
        """
        ## Как устроена трассировка

        **1. Профиль.** Узлы «глубина — скорость» делят толщу воды на слои.
        Внутри слоя скорость меняется линейно; если градиент почти нулевой,
        слой считается однородным.

        **2. Параметр луча.** По закону Снеллиуса величина `p = sin θ / v`
        сохраняется вдоль всего луча в горизонтально-слоистой среде.

        **3. Дуги.** В слое с градиентом `g` луч идёт по окружности радиуса
        `1 / |p·g|` с центром на глубине, где скорость обратилась бы в ноль.
        Луч может развернуться внутри слоя, если вершина дуги лежит в нём.

        **4. Время.** Время вдоль дуги выражается через гиперболический угол,
        поэтому конечную глубину при исчерпании времени находим аналитически.

        **5. Поправка за скорость у антенны.** Если эхолот формировал лучи с
        другой скоростью звука, угол пересчитывается по закону Снеллиуса —
        либо от вертикали, либо от нулевого угла антенны.
        """
    )

st.caption(
    "Код проекта: трассировка в `raytracing/`, визуализация в этом файле. "
    "Запуск: `streamlit run app.py`."
)
