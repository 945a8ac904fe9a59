"""A32NX flight data recorder record layout.

One record is written per simulation frame by the fly-by-wire module: the
bus, discrete and analog outputs of both ELACs, all three SECs and both FACs,
followed by the autopilot, autothrust, engine and additional data blocks.
"""

from __future__ import annotations

from .layout import (
    Array, BitDef, BitWord, Struct,
    F32, F64, FLAG, U32,
)

# Bump together with the recorder whenever any layout below changes
INTERFACE_VERSION = 3200001

# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

ARINC429 = Struct("base_arinc_429", [
    ("SSM", U32),
    ("Data", F32),
])

TIME = Struct("base_time", [
    ("dt", F64),
    ("simulation_time", F64),
])


def _words(*names: str) -> list[tuple[str, Struct]]:
    return [(n, ARINC429) for n in names]


def _doubles(*names: str) -> list[tuple[str, object]]:
    return [(n, F64) for n in names]


def _flags(*names: str) -> list[tuple[str, object]]:
    return [(n, FLAG) for n in names]


# ---------------------------------------------------------------------------
# ELAC
# ---------------------------------------------------------------------------

ELAC_OUT_BUS = Struct("base_elac_out_bus", _words(
    "left_aileron_position_deg",
    "right_aileron_position_deg",
    "left_elevator_position_deg",
    "right_elevator_position_deg",
    "ths_position_deg",
    "left_sidestick_pitch_command_deg",
    "right_sidestick_pitch_command_deg",
    "left_sidestick_roll_command_deg",
    "right_sidestick_roll_command_deg",
    "rudder_pedal_position_deg",
    "aileron_status_word",
    "left_aileron_1_command",
    "left_aileron_2_command",
    "right_aileron_1_command",
    "right_aileron_2_command",
    "left_elevator_command",
    "right_elevator_command",
    "ths_command",
    "discrete_status_word_1",
    "discrete_status_word_2",
))

ELAC_DISCRETE_OUTPUTS = Struct("base_elac_discrete_outputs", _flags(
    "pitch_axis_ok",
    "left_aileron_ok",
    "right_aileron_ok",
    "digital_output_validated",
    "ap_1_authorised",
    "ap_2_authorised",
    "left_aileron_active_mode",
    "right_aileron_active_mode",
    "left_elevator_damping_mode",
    "right_elevator_damping_mode",
    "ths_active",
))

ELAC_ANALOG_OUTPUTS = Struct("base_elac_analog_outputs", _doubles(
    "left_elev_pos_order_deg",
    "right_elev_pos_order_deg",
    "ths_pos_order",
    "left_aileron_pos_order",
    "right_aileron_pos_order",
))

# ---------------------------------------------------------------------------
# SEC
# ---------------------------------------------------------------------------

SEC_OUT_BUS = Struct("base_sec_out_bus", _words(
    "left_sidestick_pitch_command_deg",
    "right_sidestick_pitch_command_deg",
    "left_sidestick_roll_command_deg",
    "right_sidestick_roll_command_deg",
    "rudder_pedal_position_deg",
    "left_spoiler_1_position_deg",
    "right_spoiler_1_position_deg",
    "left_spoiler_2_position_deg",
    "right_spoiler_2_position_deg",
    "left_elevator_position_deg",
    "right_elevator_position_deg",
    "ths_position_deg",
    "speed_brake_command_deg",
    "discrete_status_word_1",
    "discrete_status_word_2",
))

SEC_DISCRETE_OUTPUTS = Struct("base_sec_discrete_outputs", _flags(
    "thr_reverse_selected",
    "left_elevator_ok",
    "right_elevator_ok",
    "ground_spoiler_out",
    "sec_failed",
    "left_elevator_damping_mode",
    "right_elevator_damping_mode",
    "ths_active",
))

SEC_ANALOG_OUTPUTS = Struct("base_sec_analog_outputs", _doubles(
    "left_elev_pos_order_deg",
    "right_elev_pos_order_deg",
    "ths_pos_order_deg",
    "left_spoiler_1_pos_order_deg",
    "right_spoiler_1_pos_order_deg",
    "left_spoiler_2_pos_order_deg",
    "right_spoiler_2_pos_order_deg",
))

# ---------------------------------------------------------------------------
# FAC
# ---------------------------------------------------------------------------

FAC_BUS = Struct("base_fac_bus", _words(
    "discrete_word_1",
    "gamma_a_deg",
    "gamma_t_deg",
    "total_weight_lbs",
    "center_of_gravity_pos_percent",
    "sideslip_target_deg",
    "fac_slat_angle_deg",
    "fac_flap_angle",
    "discrete_word_2",
    "rudder_travel_limit_command_deg",
    "delta_r_yaw_damper_deg",
    "estimated_sideslip_deg",
    "v_alpha_lim_kn",
    "v_ls_kn",
    "v_stall_kn",
    "v_alpha_prot_kn",
    "v_stall_warn_kn",
    "speed_trend_kn",
    "v_3_kn",
    "v_4_kn",
    "v_man_kn",
    "v_max_kn",
    "v_fe_next_kn",
    "discrete_word_3",
    "discrete_word_4",
    "discrete_word_5",
    "delta_r_rudder_trim_deg",
    "rudder_trim_pos_deg",
))

FAC_DISCRETE_OUTPUTS = Struct("base_fac_discrete_outputs", _flags(
    "fac_healthy",
    "yaw_damper_engaged",
    "rudder_trim_engaged",
    "rudder_travel_lim_engaged",
    "rudder_travel_lim_emergency_reset",
))

FAC_ANALOG_OUTPUTS = Struct("base_fac_analog_outputs", _doubles(
    "yaw_damper_order_deg",
    "rudder_trim_order_deg",
    "rudder_travel_limit_order_deg",
))

# ---------------------------------------------------------------------------
# Autopilot / autothrust
# ---------------------------------------------------------------------------

AP_SM_DATA = Struct("ap_sm_data", _doubles(
    "Theta_deg",
    "Phi_deg",
    "q_rad_s",
    "r_rad_s",
    "p_rad_s",
    "V_ias_kn",
    "V_tas_kn",
    "V_mach",
    "V_gnd_kn",
    "alpha_deg",
    "beta_deg",
    "H_ft",
    "H_ind_ft",
    "H_radio_ft",
    "H_dot_ft_min",
    "Psi_magnetic_deg",
    "Psi_magnetic_track_deg",
    "Psi_true_deg",
    "Psi_true_track_deg",
    "bx_m_s2",
    "by_m_s2",
    "bz_m_s2",
    "nav_valid",
    "nav_loc_deg",
    "nav_gs_deg",
    "flight_guidance_xtk_nmi",
    "flight_guidance_tae_deg",
    "flight_phase",
    "V2_kn",
    "VAPP_kn",
    "VLS_kn",
    "VMAX_kn",
    "is_flight_plan_available",
    "altitude_constraint_ft",
    "thrust_reduction_altitude",
    "acceleration_altitude",
    "on_ground",
    "zeta_pos",
    "throttle_lever_1_pos",
    "throttle_lever_2_pos",
    "flaps_handle_index",
))

AP_SM_OUTPUT_DATA = Struct("ap_sm_output_data", _doubles(
    "enabled_AP1",
    "enabled_AP2",
    "lateral_law",
    "lateral_mode",
    "lateral_mode_armed",
    "vertical_law",
    "vertical_mode",
    "vertical_mode_armed",
    "mode_reversion_lateral",
    "mode_reversion_vertical",
    "mode_reversion_vertical_target_fpm",
    "mode_reversion_TRK_FPA",
    "mode_reversion_triple_click",
    "mode_reversion_fma",
    "speed_protection_mode",
    "autothrust_mode",
    "Psi_c_deg",
    "H_c_ft",
    "H_dot_c_fpm",
    "FPA_c_deg",
    "V_c_kn",
    "ALT_soft_mode_active",
    "ALT_cruise_mode_active",
    "EXPED_mode_active",
    "FD_disconnect",
    "FD_connect",
    "TCAS_message_disarm",
    "TCAS_message_RA_inhibit",
    "TCAS_message_TRK_FPA_deselection",
))

AP_SM_OUTPUT = Struct("ap_sm_output", [
    ("time", TIME),
    ("data", AP_SM_DATA),
    ("output", AP_SM_OUTPUT_DATA),
])

AP_LAW_COMMAND = Struct("ap_raw_output_command", _doubles(
    "Theta_c_deg",
    "Phi_c_deg",
    "Beta_c_deg",
))

AP_RAW_OUTPUT = Struct("ap_raw_output", [
    ("time", TIME),
    ("ap_on", F64),
    ("flight_director", AP_LAW_COMMAND),
    ("autopilot", AP_LAW_COMMAND),
])

ATHR_DATA = Struct("athr_data", _doubles(
    "nz_g",
    "Theta_deg",
    "Phi_deg",
    "V_ias_kn",
    "V_tas_kn",
    "V_mach",
    "V_gnd_kn",
    "alpha_deg",
    "H_ft",
    "H_ind_ft",
    "H_radio_ft",
    "H_dot_fpm",
    "bx_m_s2",
    "by_m_s2",
    "bz_m_s2",
    "Psi_magnetic_deg",
    "Psi_magnetic_track_deg",
    "on_ground",
    "flap_handle_index",
    "is_engine_operative_1",
    "is_engine_operative_2",
    "commanded_engine_N1_1_percent",
    "commanded_engine_N1_2_percent",
    "engine_N1_1_percent",
    "engine_N1_2_percent",
    "corrected_engine_N1_1_percent",
    "corrected_engine_N1_2_percent",
    "TAT_degC",
    "OAT_degC",
))

ATHR_INPUT = Struct("athr_input", _doubles(
    "ATHR_push",
    "ATHR_disconnect",
    "TLA_1_deg",
    "TLA_2_deg",
    "V_c_kn",
    "V_LS_kn",
    "V_MAX_kn",
    "thrust_limit_REV_percent",
    "thrust_limit_IDLE_percent",
    "thrust_limit_CLB_percent",
    "thrust_limit_MCT_percent",
    "thrust_limit_FLEX_percent",
    "thrust_limit_TOGA_percent",
    "flex_temperature_degC",
    "mode_requested",
    "is_mach_mode_active",
    "alpha_floor_condition",
    "is_approach_mode_active",
    "is_SRS_TO_mode_active",
    "is_SRS_GA_mode_active",
    "is_LAND_mode_active",
    "thrust_reduction_altitude",
    "thrust_reduction_altitude_go_around",
    "flight_phase",
    "is_alt_soft_mode_active",
    "is_anti_ice_wing_active",
    "is_anti_ice_engine_1_active",
    "is_anti_ice_engine_2_active",
    "is_air_conditioning_1_active",
    "is_air_conditioning_2_active",
    "FD_active",
    "ATHR_reset_disable",
    "is_below_alpha_prot",
    "is_below_alpha_max",
))

ATHR_OUTPUT = Struct("athr_output", _doubles(
    "thrust_limit_type",
    "thrust_limit_percent",
    "commanded_N1_TLA_1_percent",
    "commanded_N1_TLA_2_percent",
    "is_in_reverse_1",
    "is_in_reverse_2",
    "thrust_limit_IDLE_percent",
    "thrust_limit_REV_percent",
    "sim_throttle_lever_1_pos",
    "sim_throttle_lever_2_pos",
    "sim_thrust_mode_1",
    "sim_thrust_mode_2",
    "N1_TLA_1_percent",
    "N1_TLA_2_percent",
    "is_in_reverse_1_status",
    "is_in_reverse_2_status",
    "N1_c_1_percent",
    "N1_c_2_percent",
    "status",
    "mode",
    "mode_message",
    "thrust_lever_warning_flex",
    "thrust_lever_warning_toga",
))

ATHR_OUT = Struct("athr_out", [
    ("time", TIME),
    ("data", ATHR_DATA),
    ("input", ATHR_INPUT),
    ("output", ATHR_OUTPUT),
])

# ---------------------------------------------------------------------------
# Engine / additional data
# ---------------------------------------------------------------------------

ENGINE_DATA = Struct("EngineData", _doubles(
    "generalEngineElapsedTime_1",
    "generalEngineElapsedTime_2",
    "standardAtmTemperature",
    "turbineDischargeTemperature",
    "engineEngine1N1",
    "engineEngine1N2",
    "engineEngine1EGT",
    "engineEngine1FF",
    "engineEngine1PreFF",
    "engineEngine1Oil",
    "engineEngine1TotalOil",
    "engineEngine1State",
    "engineEngine1Timer",
    "engineEngine2N1",
    "engineEngine2N2",
    "engineEngine2EGT",
    "engineEngine2FF",
    "engineEngine2PreFF",
    "engineEngine2Oil",
    "engineEngine2TotalOil",
    "engineEngine2State",
    "engineEngine2Timer",
    "fuelAuxLeftPre",
    "fuelAuxRightPre",
    "fuelMainLeftPre",
    "fuelMainRightPre",
    "fuelCenterPre",
    "fuelLeftPre",
    "fuelRightPre",
    "fuelWeightPerGallon",
    "fuelUsedEngine1",
    "fuelUsedEngine2",
    "thrustLimitType",
    "thrustLimitIdle",
    "thrustLimitToga",
    "thrustLimitFlex",
    "thrustLimitClimb",
    "thrustLimitMct",
))

FCU_DISCRETE_WORD = BitWord(U32, [
    BitDef("ap_1_push"),
    BitDef("ap_2_push", 1),
    BitDef("athr_push", 2),
    BitDef("loc_push", 3),
    BitDef("exped_push", 4),
    BitDef("appr_push", 5),
    BitDef("trk_fpa_mode", 6),
    BitDef("metric_alt", 7),
    BitDef("baro_mode_left", 8, 2),
    BitDef("baro_mode_right", 10, 2),
])

ADDITIONAL_DATA = Struct("AdditionalData", [
    *_doubles(
        "master_warning_active",
        "master_caution_active",
        "park_brake_lever_pos",
        "brake_pedal_left_pos",
        "brake_pedal_right_pos",
        "brake_left_sim_pos",
        "brake_right_sim_pos",
        "autobrake_armed_mode",
        "autobrake_decel_light",
        "spoilers_handle_pos",
        "spoilers_armed",
        "spoilers_handle_sim_pos",
        "ground_spoilers_active",
        "flaps_handle_percent",
        "flaps_handle_index",
        "flaps_handle_configuration_index",
        "flaps_handle_sim_index",
        "gear_handle_pos",
        "hydraulic_green_pressure",
        "hydraulic_blue_pressure",
        "hydraulic_yellow_pressure",
        "throttle_lever_1_pos",
        "throttle_lever_2_pos",
        "corrected_engine_N1_1_percent",
        "corrected_engine_N1_2_percent",
        "assisted_takeoff_enabled",
        "assisted_landing_enabled",
        "aircraft_preset_quick_mode",
        "pilot_seat",
    ),
    ("fcu_discrete_word", FCU_DISCRETE_WORD),
    ("tcas_mode", F64),
    ("wheel_speed_kn", Array(F64, 4)),
])

# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------

FDR_RECORD = Struct("FdrData", [
    ("elac_1_bus", ELAC_OUT_BUS),
    ("elac_1_discrete", ELAC_DISCRETE_OUTPUTS),
    ("elac_1_analog", ELAC_ANALOG_OUTPUTS),
    ("elac_2_bus", ELAC_OUT_BUS),
    ("elac_2_discrete", ELAC_DISCRETE_OUTPUTS),
    ("elac_2_analog", ELAC_ANALOG_OUTPUTS),
    ("sec_1_bus", SEC_OUT_BUS),
    ("sec_1_discrete", SEC_DISCRETE_OUTPUTS),
    ("sec_1_analog", SEC_ANALOG_OUTPUTS),
    ("sec_2_bus", SEC_OUT_BUS),
    ("sec_2_discrete", SEC_DISCRETE_OUTPUTS),
    ("sec_2_analog", SEC_ANALOG_OUTPUTS),
    ("sec_3_bus", SEC_OUT_BUS),
    ("sec_3_discrete", SEC_DISCRETE_OUTPUTS),
    ("sec_3_analog", SEC_ANALOG_OUTPUTS),
    ("fac_1_bus", FAC_BUS),
    ("fac_1_discrete", FAC_DISCRETE_OUTPUTS),
    ("fac_1_analog", FAC_ANALOG_OUTPUTS),
    ("fac_2_bus", FAC_BUS),
    ("fac_2_discrete", FAC_DISCRETE_OUTPUTS),
    ("fac_2_analog", FAC_ANALOG_OUTPUTS),
    ("ap_sm", AP_SM_OUTPUT),
    ("ap_law", AP_RAW_OUTPUT),
    ("athr", ATHR_OUT),
    ("engine", ENGINE_DATA),
    ("data", ADDITIONAL_DATA),
])
