

from flask import Flask, request, jsonify
from flask_cors import CORS

import config
from models.restock_input import CRITERIA_TYPE, WEIGHTS, describe_criteria, prepare_restock
from spk.errors import TopsisError
from spk.feature_deriver import DERIVED_COLUMNS
from spk.topsis_core import rank, run_topsis

app = Flask(__name__)
CORS(app)


def _error(message, status):
    return jsonify({"error": message}), status


def _internal_error(e):
    app.logger.exception("Proses TOPSIS gagal")
    return jsonify({"error": "Internal Server Error", "details": str(e)}), 500


@app.route('/api/topsis', methods=['POST'])
@app.route('/topsis', methods=['POST'])
def topsis():
    data = request.get_json(silent=True)

    # Validasi Input
    if not isinstance(data, dict) or 'alternatives' not in data:
        return _error("Data input tidak valid. Field 'alternatives' wajib ada.", 400)

    try:
        result = rank(
            data['alternatives'],
            data.get('weights'),
            data.get('criteriaType'),
        )
        return jsonify(result)

    except TopsisError as e:
        return _error(str(e), 400)
    except Exception as e:
        return _internal_error(e)


@app.route('/api/restock', methods=['POST'])
def recommend_restock():
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or 'alternatives' not in data:
        return _error("Data input tidak valid. Field 'alternatives' wajib ada.", 400)

    use_pct = data.get('delivery_percentage', config.DELIVERY_PERCENTAGE)
    if not isinstance(use_pct, bool):
        return _error("Field 'delivery_percentage' harus bernilai true/false.", 400)

    try:
        # A. VALIDASI FORM & TURUNKAN KRITERIA
        derived_df, alternatives = prepare_restock(data['alternatives'], delivery_percentage=use_pct)

        # B. HITUNG TOPSIS
        ranked = run_topsis(alternatives, WEIGHTS, CRITERIA_TYPE)

        # C. SUSUN DATA PER ALTERNATIF
        # Index hasil TOPSIS = posisi alternatif di input
        result_list = []
        for pos, row in ranked.iterrows():
            derived = derived_df.loc[pos]
            result_list.append({
                'name': row['name'],
                'score': round(float(row['score']), config.SCORE_DECIMALS),
                'rank': int(row['rank']),
                'criteria': {c: round(float(derived[c]), config.SCORE_DECIMALS) for c in DERIVED_COLUMNS},
            })

        return jsonify({
            "code": 200,
            "status": "success",
            "message": "Ranking restock berhasil dihitung.",
            "data": result_list
        })

    except TopsisError as e:
        return _error(str(e), 400)
    except Exception as e:
        return _internal_error(e)


@app.route('/api/criteria', methods=['GET'])
def criteria():
    return jsonify(describe_criteria())


if __name__ == '__main__':
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
