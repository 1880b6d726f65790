# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db loja.db
  python app.py produtos adicionar "Cimento 50kg" --quantidade 40 --preco "4 500"
  python app.py clientes adicionar "Kouassi SARL" --telefone "+225 07 00 00 00"
  python app.py pedidos criar --cliente CL-1A2B3C --item PRD-4D5E6F:3
  python app.py pedidos pagar ORD-7A8B9C --valor 10000 --metodo "Wave Money"
  python app.py backup exportar
"""

from loja.adapters.cli import main

if __name__ == "__main__":
    main()
