# app/domain/services/ruc_validator.py

RUC_LENGTH = 11
RUC_WEIGHTS = (5, 4, 3, 2, 7, 6, 5, 4, 3, 2)


def is_valid_ruc(ruc) -> bool:
    """
    Valida un RUC peruano con su dígito verificador (módulo 11).
    Cualquier entrada mal formada devuelve False; nunca lanza excepciones.
    """
    if not isinstance(ruc, str) or len(ruc) != RUC_LENGTH:
        return False
    # str.isdigit() acepta dígitos unicode, aquí solo valen ASCII
    if not all("0" <= ch <= "9" for ch in ruc):
        return False

    total = sum(int(digit) * weight for digit, weight in zip(ruc[:10], RUC_WEIGHTS))
    remainder = total % 11
    check_digit = 0 if remainder < 2 else 11 - remainder
    return check_digit == int(ruc[10])
