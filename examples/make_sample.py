#!/usr/bin/env python3
"""Write a synthetic A32NX recorder file for trying out the converter.

Usage:
    python examples/make_sample.py /tmp/sample.fdr 600

Then:
    fdr2csv -i /tmp/sample.fdr -o /tmp/sample.csv
"""

import math
import random
import sys

from fdr2csv.storage import FdrWriter

DT = 1.0 / 30

path = sys.argv[1] if len(sys.argv) > 1 else "sample.fdr"
count = int(sys.argv[2]) if len(sys.argv) > 2 else 600


def arinc(value, ssm=3):
    return {"SSM": ssm, "Data": value}


with FdrWriter(path) as w:
    for i in range(count):
        t = i * DT
        pitch = 2.5 + 0.5 * math.sin(t)
        n1 = 84.0 + random.gauss(0.0, 0.2)
        elac_bus = {
            "left_elevator_position_deg": arinc(-pitch),
            "right_elevator_position_deg": arinc(-pitch),
            "ths_position_deg": arinc(1.2),
        }
        w.write_record({
            "elac_1_bus": elac_bus,
            "elac_1_discrete": {"pitch_axis_ok": True, "ap_1_authorised": True},
            "elac_2_bus": elac_bus,
            "elac_2_discrete": {"pitch_axis_ok": True},
            "sec_1_discrete": {"left_elevator_ok": True, "right_elevator_ok": True},
            "fac_1_discrete": {"fac_healthy": True, "yaw_damper_engaged": True},
            "ap_sm": {
                "time": {"dt": DT, "simulation_time": t},
                "data": {"Theta_deg": pitch, "V_ias_kn": 250.0, "H_ft": 10000.0},
                "output": {"enabled_AP1": 1.0, "V_c_kn": 250.0, "H_c_ft": 10000.0},
            },
            "athr": {"time": {"dt": DT, "simulation_time": t},
                     "data": {"engine_N1_1_percent": n1, "engine_N1_2_percent": n1}},
            "engine": {"engineEngine1N1": n1, "engineEngine2N1": n1},
            "data": {
                "fcu_discrete_word": {"ap_1_push": int(i == 0), "baro_mode_left": 1},
                "wheel_speed_kn": [0.0, 0.0, 0.0, 0.0],
            },
        })

print(f"Wrote {count} records to {path}")
